"""
Shop settings schemas

The settings document is flat on the wire; each field is persisted as its
own key/value row.
"""
from decimal import Decimal

from app.schemas.base import CamelModel


class ShopSettings(CamelModel):
    # General
    shop_name: str = "Matrasov"
    shop_description: str = "High quality mattresses and beds"
    contact_email: str = "info@matrasov.example"
    contact_phone: str = "+7 (495) 123-45-67"
    address: str = "Moscow, Matrasnaya st. 1"
    working_hours: str = "Mon-Sun: 10:00 - 20:00"

    # Social media
    instagram_url: str = "https://instagram.com/matrasov"
    facebook_url: str = "https://facebook.com/matrasov"
    twitter_url: str = ""

    # Delivery
    enable_free_delivery: bool = True
    free_delivery_threshold: Decimal = Decimal("20000")
    delivery_price_local: Decimal = Decimal("1000")
    delivery_price_regional: Decimal = Decimal("3000")

    # Payment
    enable_cash_payment: bool = True
    enable_card_payment: bool = True
    enable_online_payment: bool = True

    # Email notifications
    send_order_confirmation: bool = True
    send_order_status_updates: bool = True
    send_order_shipped: bool = True

    # SMS notifications
    enable_sms_notifications: bool = True
    sms_order_confirmation: bool = True
    sms_order_status_update: bool = False
