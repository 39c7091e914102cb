"""Russian display labels for statuses, actions and periods."""

from __future__ import annotations

STATUS_LABELS = {
    "pending": "На модерации",
    "approved": "Одобрено",
    "rejected": "Отклонено",
    "draft": "На доработке",
}

ACTION_LABELS = {
    "approved": "Одобрено",
    "rejected": "Отклонено",
    "requestChanges": "На доработке",
}

PERIOD_LABELS = {
    "today": "Сегодня",
    "week": "7 дней",
    "month": "30 дней",
}

SORT_LABELS = {
    "createdAt-desc": "Дата (новые → старые)",
    "createdAt-asc": "Дата (старые → новые)",
    "price-desc": "Цена (убывание)",
    "price-asc": "Цена (возрастание)",
    "priority-desc": "Приоритет",
}


def translate_status(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def translate_action(action: str) -> str:
    return ACTION_LABELS.get(action, action)


def translate_period(period: str) -> str:
    return PERIOD_LABELS.get(period, period)
