"""Change auditing configuration."""

from pydantic import BaseModel, Field


class AuditConfig(BaseModel):
    """Names of the remote objects used by auditing and id allocation."""

    audit_table: str = Field(
        default="products_audit",
        description="Table receiving manually written audit rows",
    )
    announce_rpc: str = Field(
        default="set_current_user_info",
        description="RPC announcing the acting user to the session context",
    )
    allocator_rpc: str = Field(
        default="generate_product_id",
        description="RPC minting entity codes for a category",
    )
