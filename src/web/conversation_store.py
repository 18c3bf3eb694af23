"""Per-user conversation and message history in SQLite."""

import uuid
from datetime import datetime

from db import get_conn, to_iso, utcnow_iso
from shared_types import MessageRole


def create_conversation(user_id: str, title: str = "", db_path=None) -> dict:
    """Create conversation, return it."""
    conv_id = uuid.uuid4().hex
    now = utcnow_iso()
    title = title[:80].strip() or "New conversation"
    conn = get_conn(db_path)
    try:
        conn.execute(
            "INSERT INTO conversations (id, user_id, title, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
            (conv_id, user_id, title, now, now),
        )
        conn.commit()
        return {"id": conv_id, "title": title, "created_at": now, "updated_at": now, "message_count": 0}
    finally:
        conn.close()


def list_conversations(user_id: str, limit: int = 50, db_path=None) -> list[dict]:
    """List conversations for a user, most recently active first, with message count."""
    conn = get_conn(db_path)
    try:
        rows = conn.execute(
            """
            SELECT c.id, c.title, c.created_at, c.updated_at,
                   COUNT(m.id) AS message_count
            FROM conversations c
            LEFT JOIN conversation_messages m ON m.conversation_id = c.id
            WHERE c.user_id = ?
            GROUP BY c.id
            ORDER BY c.updated_at DESC
            LIMIT ?
            """,
            (user_id, limit),
        ).fetchall()
        return [dict(r) for r in rows]
    finally:
        conn.close()


def count_conversations(user_id: str, db_path=None) -> int:
    conn = get_conn(db_path)
    try:
        return conn.execute("SELECT COUNT(*) FROM conversations WHERE user_id = ?", (user_id,)).fetchone()[0]
    finally:
        conn.close()


def add_message(
    conv_id: str,
    role: str,
    content: str,
    created_at: datetime | None = None,
    db_path=None,
) -> dict:
    """Add message to conversation, bump its updated_at, return the message."""
    role = MessageRole(role)
    msg_id = uuid.uuid4().hex
    ts = to_iso(created_at)
    conn = get_conn(db_path)
    try:
        conn.execute(
            "INSERT INTO conversation_messages (id, conversation_id, role, content, created_at) VALUES (?, ?, ?, ?, ?)",
            (msg_id, conv_id, role.value, content, ts),
        )
        conn.execute(
            "UPDATE conversations SET updated_at = MAX(updated_at, ?) WHERE id = ?",
            (ts, conv_id),
        )
        conn.commit()
        return {"id": msg_id, "conversation_id": conv_id, "role": role.value, "content": content, "created_at": ts}
    finally:
        conn.close()


def get_messages(conv_id: str, limit: int | None = 20, db_path=None) -> list[dict]:
    """Get last N messages for a conversation (oldest first). ``limit=None`` returns all."""
    conn = get_conn(db_path)
    try:
        rows = conn.execute(
            """
            SELECT id, role, content, created_at FROM (
                SELECT id, role, content, created_at
                FROM conversation_messages
                WHERE conversation_id = ?
                ORDER BY created_at DESC
                LIMIT ?
            ) sub ORDER BY created_at ASC
            """,
            (conv_id, -1 if limit is None else limit),
        ).fetchall()
        return [dict(r) for r in rows]
    finally:
        conn.close()


def list_user_messages(user_id: str, limit: int | None = None, db_path=None) -> list[dict]:
    """Messages across all of a user's conversations, oldest first.

    With ``limit`` only the newest N are returned (still oldest first).
    """
    conn = get_conn(db_path)
    try:
        rows = conn.execute(
            """
            SELECT id, conversation_id, role, content, created_at FROM (
                SELECT m.id, m.conversation_id, m.role, m.content, m.created_at
                FROM conversation_messages m
                JOIN conversations c ON c.id = m.conversation_id
                WHERE c.user_id = ?
                ORDER BY m.created_at DESC
                LIMIT ?
            ) sub ORDER BY created_at ASC
            """,
            (user_id, -1 if limit is None else limit),
        ).fetchall()
        return [dict(r) for r in rows]
    finally:
        conn.close()


def count_user_messages(user_id: str, db_path=None) -> int:
    conn = get_conn(db_path)
    try:
        return conn.execute(
            """SELECT COUNT(*) FROM conversation_messages m
               JOIN conversations c ON c.id = m.conversation_id
               WHERE c.user_id = ?""",
            (user_id,),
        ).fetchone()[0]
    finally:
        conn.close()


def delete_conversation(conv_id: str, user_id: str, db_path=None) -> bool:
    """Delete conversation if it belongs to user. Returns True if deleted."""
    conn = get_conn(db_path)
    try:
        cur = conn.execute(
            "DELETE FROM conversations WHERE id = ? AND user_id = ?",
            (conv_id, user_id),
        )
        conn.commit()
        return cur.rowcount > 0
    finally:
        conn.close()


def conversation_belongs_to(conv_id: str, user_id: str, db_path=None) -> bool:
    """Check if conversation belongs to user."""
    conn = get_conn(db_path)
    try:
        row = conn.execute(
            "SELECT 1 FROM conversations WHERE id = ? AND user_id = ?",
            (conv_id, user_id),
        ).fetchone()
        return row is not None
    finally:
        conn.close()
