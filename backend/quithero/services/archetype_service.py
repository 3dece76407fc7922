# quithero/services/archetype_service.py
"""
Архетип курильщика по триггерам и эмоциональным состояниям.

- Escapist: скука и одиночество
- Stress Reactor: стресс, тревога, злость
- Social Mirror: компания и социальные ситуации
- Auto-Pilot: привычка (и значение по умолчанию)
"""
from typing import Dict, Iterable, List, Tuple

from quithero.core.schemas.profile import ArchetypeInfo
from quithero.models.enums import CravingTrigger, EmotionalState, QuitArchetype

# При равенстве баллов побеждает архетип, стоящий раньше в этом списке
ARCHETYPE_PRECEDENCE: Tuple[QuitArchetype, ...] = (
    QuitArchetype.ESCAPIST,
    QuitArchetype.STRESS_REACTOR,
    QuitArchetype.SOCIAL_MIRROR,
    QuitArchetype.AUTO_PILOT,
)

TRIGGER_WEIGHTS: Dict[str, Tuple[QuitArchetype, int]] = {
    CravingTrigger.BOREDOM.value: (QuitArchetype.ESCAPIST, 3),
    CravingTrigger.STRESS.value: (QuitArchetype.STRESS_REACTOR, 3),
    CravingTrigger.SOCIAL.value: (QuitArchetype.SOCIAL_MIRROR, 3),
    CravingTrigger.HABIT.value: (QuitArchetype.AUTO_PILOT, 3),
    # other не влияет на результат
}

EMOTIONAL_STATE_WEIGHTS: Dict[str, Tuple[QuitArchetype, int]] = {
    EmotionalState.BORED.value: (QuitArchetype.ESCAPIST, 2),
    EmotionalState.LONELY.value: (QuitArchetype.ESCAPIST, 2),
    EmotionalState.SAD.value: (QuitArchetype.ESCAPIST, 1),
    EmotionalState.STRESSED.value: (QuitArchetype.STRESS_REACTOR, 2),
    EmotionalState.ANXIOUS.value: (QuitArchetype.STRESS_REACTOR, 2),
    EmotionalState.ANGRY.value: (QuitArchetype.STRESS_REACTOR, 1),
    EmotionalState.HAPPY.value: (QuitArchetype.SOCIAL_MIRROR, 1),
    EmotionalState.EXCITED.value: (QuitArchetype.SOCIAL_MIRROR, 1),
}

ARCHETYPE_INFO: Dict[QuitArchetype, dict] = {
    QuitArchetype.ESCAPIST: {
        "name": "The Escapist",
        "description": "You tend to smoke when bored or seeking distraction from uncomfortable feelings.",
        "icon": "🌊",
        "characteristics": [
            "Smokes when feeling bored or restless",
            "Uses smoking to escape uncomfortable emotions",
            "Often smokes alone",
            "May struggle with emptiness or loneliness",
        ],
    },
    QuitArchetype.STRESS_REACTOR: {
        "name": "The Stress Reactor",
        "description": "You primarily smoke in response to stress, anxiety, or emotional pressure.",
        "icon": "⚡",
        "characteristics": [
            "Reaches for cigarettes during stressful situations",
            "Uses smoking to cope with anxiety",
            "Cravings increase under pressure",
            "Smoking feels like a quick stress relief",
        ],
    },
    QuitArchetype.SOCIAL_MIRROR: {
        "name": "The Social Mirror",
        "description": "Your smoking is heavily influenced by social situations and being around other smokers.",
        "icon": "👥",
        "characteristics": [
            "Smokes more in social settings",
            "Influenced by others who smoke",
            "Uses smoking as a social tool",
            "May feel left out when not smoking with others",
        ],
    },
    QuitArchetype.AUTO_PILOT: {
        "name": "The Auto-Pilot Smoker",
        "description": "You smoke out of habit and routine, often without conscious thought.",
        "icon": "🔄",
        "characteristics": [
            "Smokes at specific times or places automatically",
            "Often doesn't realize when lighting up",
            "Strongly tied to daily routines",
            "May smoke without actually wanting to",
        ],
    },
}


def _as_keys(values: Iterable) -> set:
    return {str(getattr(v, "value", v)).strip().lower() for v in values or ()}


def score_archetypes(triggers: Iterable, emotional_states: Iterable) -> List[Tuple[QuitArchetype, int]]:
    """Баллы по архетипам в порядке ARCHETYPE_PRECEDENCE"""
    scores = {archetype: 0 for archetype in ARCHETYPE_PRECEDENCE}
    for trigger in _as_keys(triggers):
        if trigger in TRIGGER_WEIGHTS:
            archetype, weight = TRIGGER_WEIGHTS[trigger]
            scores[archetype] += weight
    for state in _as_keys(emotional_states):
        if state in EMOTIONAL_STATE_WEIGHTS:
            archetype, weight = EMOTIONAL_STATE_WEIGHTS[state]
            scores[archetype] += weight
    return [(archetype, scores[archetype]) for archetype in ARCHETYPE_PRECEDENCE]


def classify_archetype(triggers: Iterable, emotional_states: Iterable) -> QuitArchetype:
    best, best_score = QuitArchetype.AUTO_PILOT, 0
    for archetype, score in score_archetypes(triggers, emotional_states):
        if score > best_score:
            best, best_score = archetype, score
    return best


def archetype_info(archetype: QuitArchetype) -> ArchetypeInfo:
    archetype = QuitArchetype(archetype)
    return ArchetypeInfo(archetype=archetype, **ARCHETYPE_INFO[archetype])
