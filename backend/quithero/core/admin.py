# quithero/core/admin.py
from sqladmin import Admin, ModelView
from sqladmin.authentication import AuthenticationBackend
from fastapi import Request
from quithero.core.security import verify_password
from quithero.core.config import settings
from quithero.core.database import db_helper
from quithero.repositories.user_repository import UserRepository
from quithero.models.user import User, UserRole
from quithero.models.profile import UserProfile
from quithero.models.craving import Craving
from quithero.models.engagement import Achievement, UserAchievement, ProgressStats
from quithero.models.session import UserSession

# 1. Настройка авторизации в админке
class AdminAuth(AuthenticationBackend):
    async def login(self, request: Request) -> bool:
        form = await request.form()
        email, password = form["username"], form["password"]

        async with db_helper.session_factory() as session:
            user = await UserRepository(session).get_by_email(email)

            # Проверяем пароль и роль
            if user and verify_password(password, user.password_hash):
                if user.role == UserRole.ADMIN.value:
                    request.session.update({"admin_user_id": user.id})
                    return True
        return False

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> bool:
        return request.session.get("admin_user_id") is not None

authentication_backend = AdminAuth(secret_key=settings.security.JWT_SECRET_KEY.get_secret_value())

# 2. Представления моделей (Views)

class UserAdmin(ModelView, model=User):
    column_list = [User.id, User.email, User.role, User.created_at]
    column_searchable_list = [User.email]
    column_sortable_list = [User.id, User.created_at]
    form_excluded_columns = [User.password_hash, User.cravings, User.achievements, User.sessions]
    icon = "fa-solid fa-user"

class UserProfileAdmin(ModelView, model=UserProfile):
    column_list = [UserProfile.id, UserProfile.user, UserProfile.quit_date, UserProfile.daily_consumption, UserProfile.quit_archetype]
    column_sortable_list = [UserProfile.id, UserProfile.quit_date]
    icon = "fa-solid fa-id-card"

class CravingAdmin(ModelView, model=Craving):
    column_list = [Craving.id, Craving.user, Craving.type, Craving.trigger, Craving.intensity, Craving.created_at]
    column_sortable_list = [Craving.id, Craving.created_at]
    can_edit = False  # Журнал только пополняется
    icon = "fa-solid fa-smoking"

class AchievementAdmin(ModelView, model=Achievement):
    column_list = [Achievement.id, Achievement.key, Achievement.title, Achievement.tier, Achievement.requirement_type, Achievement.requirement_value]
    column_searchable_list = [Achievement.key, Achievement.title]
    column_sortable_list = [Achievement.requirement_value]
    icon = "fa-solid fa-trophy"

class UserAchievementAdmin(ModelView, model=UserAchievement):
    column_list = [UserAchievement.id, UserAchievement.user, UserAchievement.achievement, UserAchievement.unlocked_at]
    can_edit = False
    icon = "fa-solid fa-medal"

class ProgressStatsAdmin(ModelView, model=ProgressStats):
    column_list = [ProgressStats.user_id, ProgressStats.days_smoke_free, ProgressStats.cigarettes_not_smoked, ProgressStats.money_saved, ProgressStats.last_calculated]
    can_create = False  # Строки создаёт только пересчёт прогресса
    can_edit = False
    icon = "fa-solid fa-chart-line"

class UserSessionAdmin(ModelView, model=UserSession):
    column_list = [UserSession.id, UserSession.user, UserSession.day_number, UserSession.status, UserSession.time_spent_minutes, UserSession.completed_at]
    column_sortable_list = [UserSession.id, UserSession.day_number, UserSession.completed_at]
    icon = "fa-solid fa-calendar-check"

# 3. Функция инициализации
def setup_admin(app, engine):
    admin = Admin(app, engine, authentication_backend=authentication_backend, title=f"{settings.app_name} Admin")

    admin.add_view(UserAdmin)
    admin.add_view(UserProfileAdmin)
    admin.add_view(CravingAdmin)
    admin.add_view(AchievementAdmin)
    admin.add_view(UserAchievementAdmin)
    admin.add_view(ProgressStatsAdmin)
    admin.add_view(UserSessionAdmin)
