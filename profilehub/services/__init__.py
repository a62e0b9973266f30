from profilehub.services.sessions import SessionRecord, SessionStore

__all__ = ["SessionRecord", "SessionStore"]
