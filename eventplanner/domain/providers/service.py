"""Provider service - Business logic for the provider directory"""

import logging

from sqlalchemy.orm import Session

from ...errors import Forbidden, NotFound
from ...models import Provider, Role, User
from ...schemas import AuthContext
from ...security_utils import hash_password
from .repository import ProviderRepository
from .schemas import ProviderUpdate
from .seed_data import SASKATOON_PROVIDERS, SEED_PASSWORD

logger = logging.getLogger(__name__)


class ProviderService:
    """Service layer for provider business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProviderRepository()

    def get_caller_provider(self, ctx: AuthContext) -> Provider:
        """The provider profile owned by the caller; requires the PROVIDER role"""
        if ctx.role != Role.PROVIDER:
            raise Forbidden("Forbidden. Only providers can access this endpoint.")
        provider = self.repo.get_provider_by_user(self.db, ctx.user_id)
        if not provider:
            raise NotFound("Provider profile not found")
        return provider

    def list_providers(self) -> list[tuple[Provider, int, int]]:
        """All providers with (bookingCount, activeBookings)"""
        return self.repo.list_providers_with_stats(self.db)

    def get_profile(self, ctx: AuthContext) -> tuple[Provider, dict]:
        provider = self.get_caller_provider(ctx)
        return provider, self.repo.get_booking_stats(self.db, provider.id)

    def update_profile(self, ctx: AuthContext, data: ProviderUpdate) -> Provider:
        """Update the caller's business profile"""
        provider = self.get_caller_provider(ctx)
        fields = data.model_fields_set

        updates = {}
        # Business name can't be cleared
        if data.businessName is not None:
            updates["business_name"] = data.businessName.strip()
        if "address" in fields:
            updates["address"] = data.address
        if "phone" in fields:
            updates["phone"] = data.phone
        if "email" in fields:
            updates["email"] = data.email

        provider = self.repo.update_provider(self.db, provider, **updates)
        logger.info(f"✅ Provider profile {provider.id} updated by user {ctx.user_id}")
        return provider

    def seed_providers(self) -> dict:
        """Create the fixed Saskatoon providers when the directory is empty"""
        existing = self.repo.count_providers(self.db)
        if existing > 0:
            return {
                "message": f"Providers already exist ({existing} found). Skipping seed.",
                "existingCount": existing,
            }

        hashed_password = hash_password(SEED_PASSWORD)
        created = []
        for entry in SASKATOON_PROVIDERS:
            if self.db.query(User).filter(User.email == entry["email"]).first():
                logger.info(f"User {entry['email']} already exists, skipping...")
                continue

            user = User(
                email=entry["email"],
                name=entry["name"],
                password_hash=hashed_password,
                role=Role.PROVIDER.value,
            )
            provider = self.repo.create_provider_account(
                self.db,
                user,
                business_name=entry["business_name"],
                address=entry["address"],
                phone=entry["phone"],
                email=entry["business_email"],
            )
            created.append({"id": user.id, "email": user.email, "businessName": provider.business_name})

        logger.info(f"🌱 Seeded {len(created)} providers")
        return {
            "message": f"Successfully created {len(created)} providers",
            "providers": created,
            "note": f"All providers use password: {SEED_PASSWORD}",
        }
