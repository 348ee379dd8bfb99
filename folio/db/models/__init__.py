from folio.db.models.album import Album, AlbumImage, AlbumStatus
from folio.db.models.audit_log import AuditLog
from folio.db.models.hero_slide import HeroSlide
from folio.db.models.media import Media
from folio.db.models.menu_item import MenuItem

__all__ = ["Album", "AlbumImage", "AlbumStatus", "AuditLog", "HeroSlide", "Media", "MenuItem"]
