"""DynamoDB table settings for dispatch state."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class PersistenceSettings(InfrastructureSettings):
    """Table names for the state the dispatch pipeline owns.

    Environment Variables:
        DELIVERY_RECORDS_TABLE: First delivery per (alert, destination)
        PUSH_SUBSCRIPTIONS_TABLE: Browser push subscriptions, keyed by endpoint
        SIGNAL_MESSAGES_TABLE: Parameters for signal messages, keyed by message id
    """

    DELIVERY_RECORDS_TABLE: str = Field(
        default="dispatch_delivery_records", alias="DELIVERY_RECORDS_TABLE"
    )
    PUSH_SUBSCRIPTIONS_TABLE: str = Field(
        default="user_web_push_subscriptions", alias="PUSH_SUBSCRIPTIONS_TABLE"
    )
    SIGNAL_MESSAGES_TABLE: str = Field(
        default="dispatch_signal_messages", alias="SIGNAL_MESSAGES_TABLE"
    )
