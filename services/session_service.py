# services/session_service.py

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from core.exceptions import StoreError
from core.metrics import average
from models.analytics import FocusStats, TodayFocusStats
from services.base import BaseService
from shared.models import FocusSession, SessionCreate
from utils.datetime_utils import day_start, to_utc, utc_day, utc_now

logger = logging.getLogger(__name__)

# Серия фокус-дней считается не глубже года
FOCUS_STREAK_MAX_DAYS = 365

# Размер списка последних сессий на странице фокуса
RECENT_WITH_PROJECTS_LIMIT = 7


class SessionService(BaseService):
    """
    Сессии фокуса (помодоро, глубокая работа)

    Возможности:
    - Запись завершенной сессии
    - Последние сессии пользователя и проекта
    - Статистика фокуса по проекту и за сегодня, серия дней с фокусом
    """

    entity = "sessions"

    async def create_session(self, user_id: str, data: SessionCreate,
                             now: Optional[datetime] = None) -> FocusSession:
        if data.project_id:
            await self._get_owned(data.project_id, user_id, entity="projects")

        try:
            row = await self.store.insert(self.entity, {
                "user_id": user_id,
                **data.model_dump(),
                "started_at": to_utc(data.started_at),
                "ended_at": to_utc(now) if now else utc_now()
            })
        except StoreError as e:
            logger.error(f"❌ Ошибка записи сессии фокуса для пользователя {user_id}: {e}")
            raise

        logger.info(f"⏱️ Сессия {row['id']} ({data.session_type.value}, {data.duration_minutes} мин)")
        return FocusSession.model_validate(row)

    async def get_recent_sessions(self, user_id: str, limit: int = 10) -> List[FocusSession]:
        rows = await self.store.select(self.entity, {"user_id": user_id},
                                       order_by="started_at", descending=True, limit=limit)
        return [FocusSession.model_validate(row) for row in rows]

    async def get_recent_sessions_with_projects(self, user_id: str,
                                                limit: int = RECENT_WITH_PROJECTS_LIMIT) -> List[Dict[str, Any]]:
        """Последние сессии с именем и цветом проекта; без проекта - None"""
        rows = await self.store.select(self.entity, {"user_id": user_id},
                                       order_by="started_at", descending=True, limit=limit)
        projects = {p["id"]: p for p in await self.store.select("projects", {"user_id": user_id})}

        result = []
        for row in rows:
            project = projects.get(row["project_id"])
            result.append({
                **FocusSession.model_validate(row).model_dump(mode="json"),
                "project_name": project["name"] if project else None,
                "project_color": project["color"] if project else None
            })
        return result

    async def get_project_sessions(self, project_id: str, user_id: str,
                                   limit: int = 20) -> List[FocusSession]:
        await self._get_owned(project_id, user_id, entity="projects")
        rows = await self.store.select(self.entity, {"project_id": project_id},
                                       order_by="started_at", descending=True, limit=limit)
        return [FocusSession.model_validate(row) for row in rows]

    async def get_project_focus_stats(self, project_id: str, user_id: str) -> FocusStats:
        await self._get_owned(project_id, user_id, entity="projects")
        rows = await self.store.select(self.entity, {"project_id": project_id})

        return FocusStats(
            total_sessions=len(rows),
            total_minutes=sum(row["duration_minutes"] or 0 for row in rows),
            avg_flow_state=average(row["flow_state"] for row in rows),
            avg_distraction=average(row["distraction_level"] for row in rows)
        )

    async def get_today_focus_stats(self, user_id: str,
                                    now: Optional[datetime] = None) -> TodayFocusStats:
        """Сессии и минуты за сегодня (UTC) и серия дней подряд с фокусом"""
        today = utc_day(now or utc_now())
        since = day_start(today - timedelta(days=FOCUS_STREAK_MAX_DAYS))

        rows = await self.store.select(self.entity, {"user_id": user_id}, gte={"started_at": since})
        today_rows = [row for row in rows if utc_day(row["started_at"]) == today]
        focus_days = {utc_day(row["started_at"]) for row in rows}

        # Сегодня без сессий не обрывает серию: считаем от вчера
        streak = 1 if today in focus_days else 0
        day = today - timedelta(days=1)
        while day in focus_days and streak < FOCUS_STREAK_MAX_DAYS:
            streak += 1
            day -= timedelta(days=1)

        return TodayFocusStats(
            sessions_today=len(today_rows),
            minutes_today=sum(row["duration_minutes"] or 0 for row in today_rows),
            streak=streak
        )
