"""SQL statements used by the database chat history store."""

CREATE_CONVERSATIONS_TABLE = """
    CREATE TABLE IF NOT EXISTS conversations (
        conversation_id text NOT NULL,
        last_updated    double precision NOT NULL,
        PRIMARY KEY(conversation_id)
    );
    """

#     id     message order within the conversation
#     media  JSON serialized MediaPayload
CREATE_MESSAGES_TABLE_PG = """
    CREATE TABLE IF NOT EXISTS chat_messages (
        id              BIGSERIAL PRIMARY KEY,
        conversation_id text NOT NULL REFERENCES conversations(conversation_id)
                        ON DELETE CASCADE,
        role            text NOT NULL,
        content         text NOT NULL,
        media           text
    );
    """

CREATE_MESSAGES_TABLE_SQLITE = """
    CREATE TABLE IF NOT EXISTS chat_messages (
        id              INTEGER PRIMARY KEY AUTOINCREMENT,
        conversation_id text NOT NULL REFERENCES conversations(conversation_id)
                        ON DELETE CASCADE,
        role            text NOT NULL,
        content         text NOT NULL,
        media           text
    );
    """

CREATE_MESSAGES_INDEX = """
    CREATE INDEX IF NOT EXISTS chat_messages_conversation
        ON chat_messages (conversation_id, id)
    """

INSERT_CONVERSATION_PG = """
    INSERT INTO conversations(conversation_id, last_updated)
    VALUES (%s, %s)
    """

INSERT_CONVERSATION_SQLITE = """
    INSERT INTO conversations(conversation_id, last_updated)
    VALUES (?, ?)
    """

TOUCH_CONVERSATION_PG = """
    UPDATE conversations
       SET last_updated=%s
     WHERE conversation_id=%s
    """

TOUCH_CONVERSATION_SQLITE = """
    UPDATE conversations
       SET last_updated=?
     WHERE conversation_id=?
    """

INSERT_MESSAGE_PG = """
    INSERT INTO chat_messages(conversation_id, role, content, media)
    VALUES (%s, %s, %s, %s)
    """

INSERT_MESSAGE_SQLITE = """
    INSERT INTO chat_messages(conversation_id, role, content, media)
    VALUES (?, ?, ?, ?)
    """

SELECT_CONVERSATION_PG = """
    SELECT conversation_id
      FROM conversations
     WHERE conversation_id=%s
    """

SELECT_CONVERSATION_SQLITE = """
    SELECT conversation_id
      FROM conversations
     WHERE conversation_id=?
    """

SELECT_MESSAGES_PG = """
    SELECT role, content, media
      FROM chat_messages
     WHERE conversation_id=%s
     ORDER BY id
    """

SELECT_MESSAGES_SQLITE = """
    SELECT role, content, media
      FROM chat_messages
     WHERE conversation_id=?
     ORDER BY id
    """

DELETE_MESSAGES_PG = """
    DELETE FROM chat_messages
     WHERE conversation_id=%s
    """

DELETE_MESSAGES_SQLITE = """
    DELETE FROM chat_messages
     WHERE conversation_id=?
    """

DELETE_CONVERSATION_PG = """
    DELETE FROM conversations
     WHERE conversation_id=%s
    """

DELETE_CONVERSATION_SQLITE = """
    DELETE FROM conversations
     WHERE conversation_id=?
    """
