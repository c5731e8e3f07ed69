# services/analytics_service.py

import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from core.metrics import average, productivity_score
from models.analytics import ProductivityMetrics
from models.enums import WORK_CATEGORIES, TaskStatus
from services.base import BaseService
from utils.datetime_utils import day_end, day_start, to_utc, today_utc, utc_day, utc_now

logger = logging.getLogger(__name__)

UNCATEGORIZED_NAME = "Uncategorized"
UNCATEGORIZED_COLOR = "#cbd5e1"


class AnalyticsService(BaseService):
    """
    Аналитика продуктивности

    Все выборки ограничены пользователем, дни считаются по UTC.
    """

    async def get_productivity_overview(self, user_id: str, days: int = 7,
                                        now: Optional[datetime] = None) -> ProductivityMetrics:
        """Метрики за последние days дней и итоговая оценка продуктивности"""
        now = to_utc(now) if now else utc_now()
        since = now - timedelta(days=days)

        sessions = await self.store.select("sessions", {"user_id": user_id}, gte={"started_at": since})
        vitality = await self.store.select("vitality", {"user_id": user_id}, gte={"logged_at": since})
        tasks = await self.store.select(
            "tasks",
            {"user_id": user_id, "status": TaskStatus.DONE},
            gte={"completed_at": since}
        )

        total_focus_minutes = sum(s["duration_minutes"] or 0 for s in sessions)
        avg_energy = average((v["energy_level"] for v in vitality), default=0.0)
        avg_mood = average((v["mood_score"] for v in vitality), default=0.0)

        metrics = ProductivityMetrics(
            total_focus_minutes=total_focus_minutes,
            session_count=len(sessions),
            avg_energy=avg_energy,
            avg_mood=avg_mood,
            tasks_completed=len(tasks),
            productivity_score=productivity_score(total_focus_minutes, len(tasks), avg_energy)
        )
        logger.debug(f"📊 Продуктивность {user_id} за {days} дн.: {metrics.productivity_score}")
        return metrics

    async def get_daily_focus_trends(self, user_id: str, days: int = 7,
                                     today: Optional[date] = None) -> List[Dict[str, Any]]:
        """Минуты фокуса по дням, включая дни без сессий; по возрастанию даты"""
        today = today or today_utc()
        first_day = today - timedelta(days=days - 1)

        trends = {first_day + timedelta(days=offset): 0 for offset in range(days)}
        sessions = await self.store.select("sessions", {"user_id": user_id},
                                           gte={"started_at": day_start(first_day)})
        for session in sessions:
            day = utc_day(session["started_at"])
            if day in trends:
                trends[day] += session["duration_minutes"] or 0

        return [{"date": day.isoformat(), "minutes": minutes} for day, minutes in sorted(trends.items())]

    async def get_category_distribution(self, user_id: str) -> List[Dict[str, Any]]:
        """Минуты фокуса по проектам; сессии без проекта - Uncategorized"""
        sessions = await self.store.select("sessions", {"user_id": user_id})
        projects = {p["id"]: p for p in await self.store.select("projects", {"user_id": user_id})}

        distribution: Dict[str, Dict[str, Any]] = {}
        for session in sessions:
            project = projects.get(session["project_id"])
            name = project["name"] if project else UNCATEGORIZED_NAME
            color = project["color"] if project else UNCATEGORIZED_COLOR

            entry = distribution.setdefault(name, {"name": name, "minutes": 0, "color": color})
            entry["minutes"] += session["duration_minutes"] or 0

        return list(distribution.values())

    async def get_planned_vs_actual(self, user_id: str, day: Optional[date] = None) -> Dict[str, int]:
        """Запланированная работа в планировщике против фактических минут фокуса"""
        day = day or today_utc()

        planned = await self.store.select(
            "time_allocations",
            {"user_id": user_id, "allocation_date": day, "category": list(WORK_CATEGORIES)}
        )
        actual = await self.store.select(
            "sessions",
            {"user_id": user_id},
            gte={"started_at": day_start(day)},
            lte={"started_at": day_end(day)}
        )

        return {
            "planned_minutes": sum(p["duration_minutes"] or 0 for p in planned),
            "actual_minutes": sum(a["duration_minutes"] or 0 for a in actual)
        }

    async def get_vitality_trends(self, user_id: str, limit: int = 14) -> List[Dict[str, Any]]:
        """Последние limit записей самочувствия в хронологическом порядке"""
        rows = await self.store.select("vitality", {"user_id": user_id},
                                       order_by="logged_at", descending=True, limit=limit)
        return [
            {
                "date": utc_day(row["logged_at"]).isoformat(),
                "sleep": row["sleep_quality"],
                "energy": row["energy_level"],
                "mood": row["mood_score"]
            }
            for row in reversed(rows)
        ]

    async def get_work_dynamics(self, user_id: str, limit: int = 14) -> List[Dict[str, Any]]:
        """Поток и отвлечения последних сессий в хронологическом порядке"""
        rows = await self.store.select(
            "sessions",
            {"user_id": user_id},
            not_null=("flow_state",),
            order_by="started_at",
            descending=True,
            limit=limit
        )
        return [
            {
                "date": utc_day(row["started_at"]).isoformat(),
                "flow": row["flow_state"],
                "distraction": row["distraction_level"]
            }
            for row in reversed(rows)
        ]
