from folio.admin.albums import AlbumAdminController
from folio.admin.audit import AuditLogAdminController
from folio.admin.hero_slides import HeroSlideAdminController
from folio.admin.menus import MenuAdminController

ADMIN_CONTROLLERS = [HeroSlideAdminController, AlbumAdminController, MenuAdminController, AuditLogAdminController]

__all__ = [
    "ADMIN_CONTROLLERS",
    "AlbumAdminController",
    "AuditLogAdminController",
    "HeroSlideAdminController",
    "MenuAdminController",
]
