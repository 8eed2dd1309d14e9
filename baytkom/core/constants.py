import os

from baytkom.core.config import settings

# 📁 Uploaded images (receipts, product photos, meal photos, avatars)
UPLOAD_DIR = settings.upload_dir
UPLOAD_URL_PREFIX = "/uploads"
ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/png", "image/webp"]

os.makedirs(UPLOAD_DIR, exist_ok=True)

ROLES = ("admin", "household", "maid", "driver")


class OrderStatus:
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    ALL = (PENDING, APPROVED, REJECTED, IN_PROGRESS, COMPLETED)
    TERMINAL = (REJECTED, COMPLETED)


class TripStatus:
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    STARTED = "started"
    WAITING = "waiting"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    ALL = (PENDING, APPROVED, REJECTED, STARTED, WAITING, COMPLETED, CANCELLED)
    TERMINAL = (REJECTED, COMPLETED, CANCELLED)
    ACTIVE = (STARTED, WAITING)
    SCHEDULED = (PENDING, APPROVED, STARTED, WAITING)


SHORTAGE_STATUSES = ("pending", "approved", "rejected", "purchased")
SPARE_PART_STATUSES = ("pending", "ordered", "received", "installed", "cancelled")
MEAL_TYPES = ("breakfast", "lunch", "dinner")
TASK_FREQUENCIES = ("daily", "weekly", "monthly", "once")

DEFAULT_TRIP_DURATION = 30  # minutes

# Notification type prefix -> badge section
NOTIFICATION_SECTIONS = {
    "order": "groceries",
    "shortage": "groceries",
    "trip": "logistics",
    "spare_part": "logistics",
    "laundry": "housekeeping",
    "housekeeping": "housekeeping",
    "maid_call": "housekeeping",
}
SECTIONS = ("home", "groceries", "logistics", "housekeeping")
