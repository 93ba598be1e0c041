from .base import Base
from .dispatcher import Dispatcher
from .driver import Driver
from .division import Division
from .equipment import Truck, Trailer
from .zip_code import ZipCode
from .route_status import RouteStatus
from .route import Route, RouteComment, RouteAudit
from .weekly_route import WeeklyRoute, WeeklyRouteDetail, WeeklyRouteAudit
from .user import User, UserPermission
