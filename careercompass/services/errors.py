class CareerServiceError(RuntimeError):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class UserNotFound(CareerServiceError):
    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} not found.", status_code=404)
        self.user_id = user_id


class ProfileNotReady(CareerServiceError):
    def __init__(self, user_id: int):
        super().__init__(
            f"User {user_id} has no analyzed profile yet. Submit a resume or profile first.",
            status_code=409,
        )
        self.user_id = user_id


class ChatSessionNotFound(CareerServiceError):
    def __init__(self, session_id: int):
        super().__init__(f"Chat session {session_id} not found.", status_code=404)
        self.session_id = session_id


class UnsupportedResumeType(CareerServiceError):
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class UnreadableResume(CareerServiceError):
    def __init__(self, message: str):
        super().__init__(message, status_code=400)
