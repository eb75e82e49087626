from __future__ import annotations
from typing import Any

# ===============================================================
# String table
# ===============================================================
_STRINGS: dict[str, str] = {
    # ---------------- Common ----------------
    "common.error_generic": "Что-то пошло не так. Попробуй ещё раз позже.",
    "common.none": "—",
    # ---------------- Commands ----------------
    "cmd.stats.description": "Показать мою статистику",
    # ---------------- /stats ----------------
    "stats.title": "📊 Статистика пользователя",
    "stats.field.messages": "💬 Сообщений",
    "stats.field.voice": "🎧 Время в войсе",
    "stats.field.games": "🎮 Замечен в играх",
    "stats.field.game_sessions": "🕹 Игровых сессий",
    "stats.field.first_seen": "🗓 Первый раз замечен",
    "stats.value.voice_hours": "{hours:.2f} ч",
    # ---------------- Digest ----------------
    "digest.header": "🏆 **Итоги недели**",
    "digest.entry": "**{title}**\n{description}",
    # ---------------- Achievements ----------------
    "ach.period.week": "неделя",
    "ach.voice_master.title": "🎧 Хозяин голосового канала",
    "ach.voice_master.desc": "{user} провёл в голосовых каналах больше всех — {value} за неделю.",
    "ach.frequent_visitor.title": "🚪 Частый гость",
    "ach.frequent_visitor.value": "{count} входов",
    "ach.frequent_visitor.desc": "{user} заходил в голосовые каналы чаще всех — {count} раз за неделю.",
    "ach.marathoner.title": "⏱ Марафонец",
    "ach.marathoner.desc": "{user} провёл в одном голосовом канале рекордное время — {value}.",
    "ach.game_fan.title": "🎮 Преданный фанат",
    "ach.game_fan.desc": "{user} чаще всех был замечен в игре **{game}**.",
    "ach.duration": "{hours}h {minutes}m",
    # ---------------- Generator ----------------
    "ai.system": (
        "Ты пишешь короткие, смешные и дружелюбные достижения "
        "для Discord-сервера небольшого комьюнити."
    ),
    "ai.prompt": (
        "Название достижения: {title}\n"
        "Победитель: {user}\n"
        "Значение: {value}\n"
        "Период: {period}\n"
        "\n"
        "Сформулируй короткое, смешное и дружелюбное описание для Discord."
    ),
}


def S(key: str, /, **fmt: Any) -> str:
    """Lookup + format. Unknown keys return the key; safe on format errors."""
    template = _STRINGS.get(key, key)
    try:
        return template.format(**fmt) if fmt else template
    except Exception:
        return template

