"""
Game rule configuration and validation.
"""

from pydantic import BaseModel, Field, field_validator

from .models import TableRules


class RuleConfig(BaseModel):
    """Configuration for game rules and settings."""

    forced_trump_holder: bool = Field(
        default=True,
        description="On a pass-out, the holder of spadille must play entrada (espada obligatoria)"
    )
    penetro_enabled: bool = Field(
        default=True,
        description="On a pass-out in quadrille, all four seats play penetro"
    )
    game_target: int = Field(
        default=12,
        ge=1,
        le=100,
        description="Score that ends the game"
    )
    turn_timeout: float = Field(
        default=25.0,
        gt=0,
        le=300,
        description="Seconds a human may take before the bot acts for them"
    )
    bot_delay_min: float = Field(
        default=0.6,
        ge=0,
        le=10,
        description="Minimum bot thinking time in seconds"
    )
    bot_delay_max: float = Field(
        default=1.2,
        ge=0,
        le=10,
        description="Maximum bot thinking time in seconds"
    )
    game_end_pause: float = Field(
        default=3.0,
        ge=0,
        le=60,
        description="Seconds between the end of a game and the next deal"
    )

    @field_validator('bot_delay_max')
    @classmethod
    def validate_bot_delay_max(cls, v, info):
        """Validate maximum bot delay isn't below the minimum."""
        bot_delay_min = info.data.get('bot_delay_min', 0.6)
        if v < bot_delay_min:
            raise ValueError(f'bot_delay_max ({v}) must be >= bot_delay_min ({bot_delay_min})')
        return v

    def table_rules(self) -> TableRules:
        """The rule toggles published in the room state."""
        return TableRules(
            forced_trump_holder=self.forced_trump_holder,
            penetro_enabled=self.penetro_enabled,
        )


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)
