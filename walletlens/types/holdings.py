from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class MetadataAttribute(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    trait_type: Optional[str] = Field(default=None, description="Trait name, e.g. Background")
    value: Union[str, int, float] = Field(default="", description="Trait value")

    @field_validator("trait_type", mode="before")
    @classmethod
    def _coerce_trait_type(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, v: Any) -> Union[str, int, float]:
        if v is None:
            return ""
        # bool is an int subclass; keep it textual so it round-trips as "true"/"false"
        if isinstance(v, bool):
            return str(v).lower()
        if isinstance(v, (str, int, float)):
            return v
        return str(v)


class TokenMetadata(BaseModel):
    """Display metadata for an NFT, as found at its token URI."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: Optional[str] = Field(default=None, description="NFT display name")
    description: Optional[str] = Field(default=None, description="Free-form description")
    image: Optional[str] = Field(default=None, description="Image URL")
    attributes: List[MetadataAttribute] = Field(default_factory=list, description="Ordered trait list")

    @field_validator("name", "description", "image", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return None

    @field_validator("attributes", mode="before")
    @classmethod
    def _coerce_attributes(cls, v: Any) -> List[Any]:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, dict)]


class FungibleTokenEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    token_address: str = Field(description="Token contract address")
    name: str = Field(description="Full token name")
    symbol: str = Field(description="Token symbol (e.g. USDC)")
    logo: Optional[str] = Field(default=None, description="Logo URL, null when the indexer has none")
    decimals: int = Field(description="Token decimal places")
    balance: str = Field(description="Raw balance in smallest unit, as decimal text")
    type: Literal["ERC-20"] = "ERC-20"


class NonFungibleTokenEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    token_address: str = Field(description="Collection contract address")
    name: str = Field(description="Collection name")
    symbol: str = Field(description="Collection symbol")
    token_id: str = Field(description="Token ID as decimal text")
    metadata: Optional[TokenMetadata] = Field(default=None, description="Resolved metadata, if any")
    type: Literal["NFT"] = "NFT"


Holding = Annotated[
    Union[FungibleTokenEntry, NonFungibleTokenEntry],
    Field(discriminator="type"),
]

HoldingList = TypeAdapter(List[Holding])
