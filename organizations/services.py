"""Membership rules for organizations."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.db.models import Count

from .models import ADMIN_ROLES, Organization, OrganizationMember

logger = logging.getLogger(__name__)

__all__ = [
    "OrganizationAccess",
    "get_membership",
    "is_org_admin",
    "require_org_admin",
    "organization_access",
    "create_organization",
    "update_organization",
    "delete_organization",
    "list_my_organizations",
    "add_member",
    "remove_member",
    "leave_organization",
    "change_member_role",
]


@dataclass(frozen=True)
class OrganizationAccess:
    """What the viewing user may do with an organization."""

    membership: OrganizationMember | None

    @property
    def is_member(self) -> bool:
        return self.membership is not None

    @property
    def is_owner(self) -> bool:
        return self.is_member and self.membership.role == OrganizationMember.Role.OWNER

    @property
    def is_admin(self) -> bool:
        return self.is_member and self.membership.role in ADMIN_ROLES


def get_membership(user, organization: Organization | int) -> OrganizationMember | None:
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    org_id = organization.pk if isinstance(organization, Organization) else organization
    return OrganizationMember.objects.filter(user=user, organization_id=org_id).first()


def is_org_admin(user, organization: Organization | int) -> bool:
    membership = get_membership(user, organization)
    return membership is not None and membership.role in ADMIN_ROLES


def require_org_admin(user, organization: Organization | int, message: str = "You don't have permission to manage this organization") -> None:
    if not is_org_admin(user, organization):
        raise PermissionDenied(message)


def organization_access(user, organization: Organization) -> OrganizationAccess:
    return OrganizationAccess(membership=get_membership(user, organization))


def _check_slug(slug: str, *, exclude_pk: int | None = None) -> None:
    queryset = Organization.objects.filter(slug=slug)
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    if queryset.exists():
        raise ValidationError({"slug": "This slug is already taken"})


@transaction.atomic
def create_organization(user, **fields) -> Organization:
    """Create an organization and make ``user`` its owner."""

    _check_slug(fields.get("slug", ""))
    organization = Organization(**fields)
    organization.full_clean()
    organization.save()
    OrganizationMember.objects.create(
        user=user,
        organization=organization,
        role=OrganizationMember.Role.OWNER,
    )
    logger.info("Organization %s created by %s", organization.slug, user.email)
    return organization


def update_organization(user, organization: Organization, **fields) -> Organization:
    require_org_admin(user, organization, "You don't have permission to update this organization")
    if "slug" in fields and fields["slug"] != organization.slug:
        _check_slug(fields["slug"], exclude_pk=organization.pk)
    for name, value in fields.items():
        setattr(organization, name, value)
    organization.full_clean()
    organization.save()
    return organization


def delete_organization(user, organization: Organization) -> None:
    if not organization_access(user, organization).is_owner:
        raise PermissionDenied("Only the owner can delete this organization")
    logger.info("Organization %s deleted by %s", organization.slug, user.email)
    organization.delete()


def list_my_organizations(user):
    """Return the user's memberships with member and event counts attached."""

    return (
        OrganizationMember.objects.filter(user=user)
        .select_related("organization")
        .annotate(
            member_count=Count("organization__memberships", distinct=True),
            hackathon_count=Count("organization__hackathons", distinct=True),
            contest_count=Count("organization__coding_contests", distinct=True),
        )
        .order_by("-joined_at")
    )


def add_member(user, organization: Organization, email: str, role: str = OrganizationMember.Role.MEMBER) -> OrganizationMember:
    require_org_admin(user, organization, "You don't have permission to add members")
    if role not in (OrganizationMember.Role.ADMIN, OrganizationMember.Role.MEMBER):
        raise ValidationError("Invalid role")
    target = get_user_model().objects.filter(email__iexact=(email or "").strip()).first()
    if target is None:
        raise ValidationError("No user found with this email")
    if OrganizationMember.objects.filter(user=target, organization=organization).exists():
        raise ValidationError("User is already a member of this organization")
    return OrganizationMember.objects.create(user=target, organization=organization, role=role)


def remove_member(user, organization: Organization, member: OrganizationMember) -> None:
    access = organization_access(user, organization)
    if not access.is_admin:
        raise PermissionDenied("You don't have permission to remove members")
    if member.organization_id != organization.pk:
        raise ValidationError("Member not found")
    if member.role == OrganizationMember.Role.OWNER:
        raise ValidationError("Cannot remove the organization owner")
    if member.role == OrganizationMember.Role.ADMIN and not access.is_owner:
        raise PermissionDenied("Only the owner can remove admins")
    member.delete()


def leave_organization(user, organization: Organization) -> None:
    membership = get_membership(user, organization)
    if membership is None:
        raise ValidationError("You are not a member of this organization")
    if membership.role == OrganizationMember.Role.OWNER:
        raise ValidationError("Owner cannot leave the organization. Transfer ownership first.")
    membership.delete()


def change_member_role(user, organization: Organization, member: OrganizationMember, role: str) -> OrganizationMember:
    if not organization_access(user, organization).is_owner:
        raise PermissionDenied("Only the owner can change member roles")
    if member.organization_id != organization.pk:
        raise ValidationError("Member not found")
    if member.role == OrganizationMember.Role.OWNER:
        raise ValidationError("Cannot change the owner's role")
    if role not in (OrganizationMember.Role.ADMIN, OrganizationMember.Role.MEMBER):
        raise ValidationError("Invalid role")
    member.role = role
    member.save(update_fields=["role"])
    return member
