from .base import Base
from .user import User
from .catalog import Category, Store, Product, ProductAlternative
from .order import Order, OrderItem
from .logistics import Vehicle, Trip, TripLocation, Technician, SparePartOrder
from .housekeeping import (
    Room,
    UserRoom,
    HousekeepingTask,
    TaskCompletion,
    LaundryRequest,
    LaundrySchedule,
    MaidCall,
)
from .meal import MealItem, Meal
from .shortage import Shortage
from .notification import Notification, PushSubscription
