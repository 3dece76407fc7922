# quithero/models/enums.py
import enum


class CravingType(str, enum.Enum):
    CRAVING = "craving"
    SLIP = "slip"


class CravingTrigger(str, enum.Enum):
    STRESS = "stress"
    BOREDOM = "boredom"
    SOCIAL = "social"
    HABIT = "habit"
    OTHER = "other"


class EmotionalState(str, enum.Enum):
    BORED = "bored"
    LONELY = "lonely"
    SAD = "sad"
    STRESSED = "stressed"
    ANXIOUS = "anxious"
    ANGRY = "angry"
    HAPPY = "happy"
    EXCITED = "excited"


class QuitArchetype(str, enum.Enum):
    ESCAPIST = "escapist"
    STRESS_REACTOR = "stress_reactor"
    SOCIAL_MIRROR = "social_mirror"
    AUTO_PILOT = "auto_pilot"


class AchievementTier(str, enum.Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class RequirementType(str, enum.Enum):
    DAYS_STREAK = "days_streak"
    CRAVINGS_RESISTED = "cravings_resisted"
    SESSIONS_COMPLETED = "sessions_completed"


class ConsumptionUnit(str, enum.Enum):
    CIGARETTES = "cigarettes"
    ML = "ml"
    GRAMS = "grams"


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    PREFER_NOT_TO_SAY = "prefer_not_to_say"


class SessionStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
