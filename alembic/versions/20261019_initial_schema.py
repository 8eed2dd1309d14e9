"""Initial household schema

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

Creates every table: users, catalog, orders, logistics, housekeeping,
meals, shortages and notifications.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ---------- Users ----------
    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('password', sa.String(200), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('first_name_en', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('display_name', sa.String(), nullable=True),
        sa.Column('profile_image_url', sa.String(), nullable=True),
        sa.Column('role', sa.String(20), nullable=False, server_default='household'),
        sa.Column('can_approve', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('can_add_shortages', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('can_approve_trips', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_suspended', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    # ---------- Catalog ----------
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name_ar', sa.String(100), nullable=False),
        sa.Column('name_en', sa.String(100), nullable=True),
        sa.Column('icon', sa.String(50), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=True),
    )
    op.create_table(
        'stores',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name_ar', sa.String(200), nullable=False),
        sa.Column('name_en', sa.String(200), nullable=True),
        sa.Column('website_url', sa.String(500), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name_ar', sa.String(200), nullable=False),
        sa.Column('name_en', sa.String(200), nullable=True),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('estimated_price', sa.Integer(), nullable=True),
        sa.Column('preferred_store', sa.String(200), nullable=True),
        sa.Column('store_id', sa.Integer(), sa.ForeignKey('stores.id', ondelete='SET NULL'), nullable=True),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('icon', sa.String(50), nullable=True),
        sa.Column('unit', sa.String(50), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index('ix_products_name_ar', 'products', ['name_ar'])
    op.create_table(
        'product_alternatives',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('alternative_product_id', sa.Integer(), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
    )
    op.create_index('ix_product_alternatives_product_id', 'product_alternatives', ['product_id'])

    # ---------- Orders ----------
    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('created_by', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('approved_by', sa.String(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('assigned_driver', sa.String(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('total_estimated', sa.Integer(), nullable=True),
        sa.Column('total_actual', sa.Integer(), nullable=True),
        sa.Column('receipt_image_url', sa.String(500), nullable=True),
        sa.Column('scheduled_for', sa.String(10), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
    )
    op.create_index('idx_orders_status', 'orders', ['status'])
    op.create_index('idx_orders_driver', 'orders', ['assigned_driver', 'status'])
    op.create_table(
        'order_items',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('estimated_price', sa.Integer(), nullable=True),
        sa.Column('actual_price', sa.Integer(), nullable=True),
        sa.Column('is_purchased', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('substitute_product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])

    # ---------- Logistics ----------
    op.create_table(
        'vehicles',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('odometer_reading', sa.Integer(), nullable=True),
        sa.Column('last_maintenance_date', sa.DateTime(), nullable=True),
        sa.Column('is_private', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('assigned_user_id', sa.String(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'trips',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('person_name', sa.String(200), nullable=False),
        sa.Column('location', sa.String(500), nullable=False),
        sa.Column('departure_time', sa.DateTime(), nullable=False),
        sa.Column('estimated_duration', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('approved_by', sa.String(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('assigned_driver', sa.String(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('vehicle_id', sa.Integer(), sa.ForeignKey('vehicles.id'), nullable=True),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('waiting_started_at', sa.DateTime(), nullable=True),
        sa.Column('waiting_duration', sa.Integer(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_personal', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_by', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('idx_trips_driver', 'trips', ['assigned_driver', 'status'])
    op.create_index('idx_trips_departure', 'trips', ['departure_time'])
    op.create_table(
        'trip_locations',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name_ar', sa.String(200), nullable=False),
        sa.Column('name_en', sa.String(200), nullable=True),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'technicians',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('specialty', sa.String(100), nullable=False),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'spare_part_orders',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('price', sa.Integer(), nullable=True),
        sa.Column('vehicle_id', sa.Integer(), sa.ForeignKey('vehicles.id'), nullable=True),
        sa.Column('technician_id', sa.Integer(), sa.ForeignKey('technicians.id'), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('assigned_to', sa.String(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_by', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )

    # ---------- Housekeeping ----------
    op.create_table(
        'rooms',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name_ar', sa.String(200), nullable=False),
        sa.Column('name_en', sa.String(200), nullable=True),
        sa.Column('icon', sa.String(50), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_excluded', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('sort_order', sa.Integer(), nullable=True),
    )
    op.create_table(
        'user_rooms',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id', ondelete='CASCADE'), nullable=False),
        sa.UniqueConstraint('user_id', 'room_id', name='uq_user_room'),
    )
    op.create_index('ix_user_rooms_user_id', 'user_rooms', ['user_id'])
    op.create_table(
        'housekeeping_tasks',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title_ar', sa.String(200), nullable=False),
        sa.Column('title_en', sa.String(200), nullable=True),
        sa.Column('frequency', sa.String(20), nullable=False, server_default='daily'),
        sa.Column('days_of_week', sa.JSON(), nullable=True),
        sa.Column('weeks_of_month', sa.JSON(), nullable=True),
        sa.Column('specific_date', sa.String(10), nullable=True),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id'), nullable=False),
        sa.Column('icon', sa.String(50), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('sort_order', sa.Integer(), nullable=True),
    )
    op.create_table(
        'task_completions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('task_id', sa.Integer(), sa.ForeignKey('housekeeping_tasks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('completed_by', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('completion_date', sa.String(13), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('task_id', 'completion_date', name='uq_task_completion'),
    )
    op.create_index('ix_task_completions_task_id', 'task_completions', ['task_id'])
    op.create_index('ix_task_completions_completion_date', 'task_completions', ['completion_date'])
    op.create_table(
        'laundry_requests',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id'), nullable=False),
        sa.Column('requested_by', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('completed_by', sa.String(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'laundry_schedule',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_table(
        'maid_calls',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('called_by', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('dismissed_at', sa.DateTime(), nullable=True),
    )

    # ---------- Meals / shortages ----------
    op.create_table(
        'meal_items',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('meal_type', sa.String(20), nullable=False),
        sa.Column('name_ar', sa.String(200), nullable=False),
        sa.Column('name_en', sa.String(200), nullable=True),
        sa.Column('image_url', sa.String(500), nullable=True),
    )
    op.create_table(
        'meals',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('date_str', sa.String(10), nullable=True),
        sa.Column('meal_type', sa.String(20), nullable=False),
        sa.Column('title_ar', sa.String(200), nullable=False),
        sa.Column('title_en', sa.String(200), nullable=True),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('people_count', sa.Integer(), nullable=False, server_default='4'),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    op.create_index('ix_meals_date_str', 'meals', ['date_str'])
    op.create_table(
        'shortages',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name_ar', sa.String(200), nullable=False),
        sa.Column('name_en', sa.String(200), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('created_by', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('approved_by', sa.String(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    # ---------- Notifications ----------
    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title_ar', sa.String(300), nullable=False),
        sa.Column('title_en', sa.String(300), nullable=True),
        sa.Column('body_ar', sa.Text(), nullable=True),
        sa.Column('body_en', sa.Text(), nullable=True),
        sa.Column('type', sa.String(50), nullable=False, server_default='general'),
        sa.Column('url', sa.String(500), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('idx_notifications_user_read', 'notifications', ['user_id', 'is_read'])
    op.create_table(
        'push_subscriptions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('endpoint', sa.Text(), nullable=False),
        sa.Column('p256dh', sa.Text(), nullable=False),
        sa.Column('auth', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('user_id', 'endpoint', name='uq_push_user_endpoint'),
    )
    op.create_index('ix_push_subscriptions_user_id', 'push_subscriptions', ['user_id'])


def downgrade():
    for table in (
        'push_subscriptions', 'notifications', 'shortages', 'meals', 'meal_items',
        'maid_calls', 'laundry_schedule', 'laundry_requests', 'task_completions',
        'housekeeping_tasks', 'user_rooms', 'rooms', 'spare_part_orders', 'technicians',
        'trip_locations', 'trips', 'vehicles', 'order_items', 'orders',
        'product_alternatives', 'products', 'stores', 'categories', 'users',
    ):
        op.drop_table(table)
