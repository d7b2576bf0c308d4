from .chat import ChatRequest, ChatResponse, ChatSession, ConversationMessage
from .match import Match, MatchResult, MatchStatus, MatchStatusUpdate, MatchWithOpportunity
from .opportunity import Opportunity, OpportunityCategory, OpportunityCreate
from .profile import Profile
from .user import QuickScanRequest, User, UserCreate

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ChatSession",
    "ConversationMessage",
    "Match",
    "MatchResult",
    "MatchStatus",
    "MatchStatusUpdate",
    "MatchWithOpportunity",
    "Opportunity",
    "OpportunityCategory",
    "OpportunityCreate",
    "Profile",
    "QuickScanRequest",
    "User",
    "UserCreate",
]
