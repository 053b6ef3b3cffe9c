"""
Workshop and store profile management.

Every marketplace user owns at most one profile matching its role. The API
layer resolves the acting workshop or store through these helpers.
"""
import logging
from typing import Dict

from django.db import IntegrityError, transaction

from authentication.models import UserRole
from project.exceptions import AuthorizationError, ConflictError, NotFound, ValidationError
from quotations.validators import validate_categories
from .models import Store, Workshop

logger = logging.getLogger(__name__)

PROFILE_MODELS = {
    UserRole.WORKSHOP: Workshop,
    UserRole.STORE: Store,
}

COMMON_FIELDS = ('name', 'tax_id', 'phone_number', 'address', 'city', 'region')
STORE_FIELDS = COMMON_FIELDS + ('coverage_regions', 'categories')


def _profile_model(user):
    try:
        return PROFILE_MODELS[user.role]
    except KeyError:
        raise AuthorizationError("Only workshops and stores have a profile")


def get_workshop_for_user(user) -> Workshop:
    try:
        return Workshop.objects.get(user=user)
    except Workshop.DoesNotExist:
        raise NotFound("Workshop profile not found. Create it first.")


def get_store_for_user(user) -> Store:
    try:
        return Store.objects.get(user=user)
    except Store.DoesNotExist:
        raise NotFound("Store profile not found. Create it first.")


def _clean(model, data: Dict) -> Dict:
    allowed = STORE_FIELDS if model is Store else COMMON_FIELDS
    cleaned = {field: value for field, value in data.items() if field in allowed}
    if 'categories' in cleaned:
        cleaned['categories'] = validate_categories(cleaned['categories'])
    if 'coverage_regions' in cleaned:
        regions = cleaned['coverage_regions'] or []
        if not isinstance(regions, list) or not all(isinstance(region, str) for region in regions):
            raise ValidationError(
                "Coverage regions must be a list of region names",
                errors={'coverage_regions': ["Must be a list of region names"]}
            )
        cleaned['coverage_regions'] = regions
    return cleaned


class ProfileService:

    @staticmethod
    def get_profile(user):
        model = _profile_model(user)
        try:
            return model.objects.get(user=user)
        except model.DoesNotExist:
            raise NotFound(f"{model.__name__} profile not found")

    @staticmethod
    @transaction.atomic
    def create_profile(user, data: Dict):
        """Create the user's workshop or store profile. One per user, tax ids unique."""
        model = _profile_model(user)
        if model.objects.filter(user=user).exists():
            raise ConflictError(f"{model.__name__} profile already exists")

        cleaned = _clean(model, data)
        if model.objects.filter(tax_id=cleaned.get('tax_id')).exists():
            raise ConflictError("Tax id is already registered")

        try:
            with transaction.atomic():
                profile = model.objects.create(user=user, **cleaned)
        except IntegrityError:
            raise ConflictError(f"{model.__name__} profile already exists or tax id is taken")

        logger.info("Created %s profile %s for user %s", model.__name__, profile.pk, user.pk)
        return profile

    @staticmethod
    @transaction.atomic
    def update_profile(user, data: Dict):
        profile = ProfileService.get_profile(user)
        cleaned = _clean(type(profile), data)
        cleaned.pop('tax_id', None)
        for field, value in cleaned.items():
            setattr(profile, field, value)
        profile.save()
        logger.info("Updated %s profile %s: %s", type(profile).__name__, profile.pk, sorted(cleaned))
        return profile
