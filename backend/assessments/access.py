"""
Caller checks shared by the attempt, analytics and leaderboard endpoints.
"""
from .error_codes import ErrorCodes
from .errors import AuthenticationError, AuthorizationError, NotFoundError
from .models import UserAccount


def require_caller(user) -> UserAccount:
    """Return the authenticated UserAccount or raise AuthenticationError."""
    if user is None or not getattr(user, 'is_authenticated', False) or not isinstance(user, UserAccount):
        raise AuthenticationError()
    return user


def require_admin(user) -> UserAccount:
    caller = require_caller(user)
    if not caller.is_admin:
        raise AuthorizationError("Admin access required")
    return caller


def require_not_suspended(caller: UserAccount) -> UserAccount:
    if caller.is_suspended:
        raise AuthorizationError("Your account is suspended", code=ErrorCodes.ACCOUNT_SUSPENDED)
    return caller


def ensure_same_organization(caller: UserAccount, organization_id: str):
    if caller.organization_id != organization_id:
        raise AuthorizationError(
            "Resource belongs to another organization",
            code=ErrorCodes.CROSS_ORGANIZATION_ACCESS
        )


def get_user_in_organization(caller: UserAccount, user_id) -> UserAccount:
    """Load another member of the caller's organization."""
    try:
        target = UserAccount.objects.select_related('batch').get(user_id=user_id)
    except UserAccount.DoesNotExist:
        raise NotFoundError(f"User {user_id} not found", resource_type="user")
    ensure_same_organization(caller, target.organization_id)
    return target


def ensure_can_view_user(caller: UserAccount, user_id) -> UserAccount:
    """
    Owners see their own data; admins see anyone in their organization.
    Returns the target account.
    """
    if str(caller.user_id) == str(user_id):
        return caller
    target = get_user_in_organization(caller, user_id)
    if not caller.is_admin:
        raise AuthorizationError("You can only view your own results")
    return target
