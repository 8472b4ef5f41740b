from .tenant import Tenant  # noqa: F401
from .role import Role  # noqa: F401
from .user import User  # noqa: F401
from .member import Member  # noqa: F401
from .plan import Plan  # noqa: F401
from .membership import Membership  # noqa: F401
from .payment import Payment  # noqa: F401
