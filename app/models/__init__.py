from app.models.user import User, UserRole
from app.models.vendor import Vendor
from app.models.vlogger import Vlogger
from app.models.vendor_promotion import VendorPromotion, PromotionStatus
from app.models.vlogger_post import VloggerPost, PostStatus

__all__ = [
    "User", "UserRole", "Vendor", "Vlogger",
    "VendorPromotion", "PromotionStatus", "VloggerPost", "PostStatus",
]
