"""Application configuration."""

import os
from dataclasses import dataclass

# USDC on Base
BASE_USDC_ADDRESS = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"


@dataclass
class Config:
    """Application configuration loaded from environment variables."""
    
    # API settings
    host: str = "0.0.0.0"
    port: int = 8000
    
    # Supabase project (service role key gives admin table access)
    supabase_url: str = ""
    supabase_service_key: str = ""
    
    # Splits relay that signs split transactions for the controller
    splits_relay_url: str = ""
    splits_api_key: str = ""
    
    # Controller of the challenge split contracts
    admin_address: str = ""
    usdc_address: str = BASE_USDC_ADDRESS
    
    # Challenges that ended within this many hours are paid out by the batch run
    distribution_window_hours: int = 24
    
    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            supabase_url=os.getenv("SUPABASE_URL", ""),
            supabase_service_key=os.getenv("SUPABASE_SERVICE_KEY", ""),
            splits_relay_url=os.getenv("SPLITS_RELAY_URL", ""),
            splits_api_key=os.getenv("SPLITS_API_KEY", ""),
            admin_address=os.getenv("ADMIN_ADDRESS", ""),
            usdc_address=os.getenv("USDC_ADDRESS", BASE_USDC_ADDRESS),
            distribution_window_hours=int(os.getenv("DISTRIBUTION_WINDOW_HOURS", "24")),
        )

    def missing_settings(self) -> list[str]:
        """Names of the settings required for reward distribution that are unset."""
        required = {
            "SUPABASE_URL": self.supabase_url,
            "SUPABASE_SERVICE_KEY": self.supabase_service_key,
            "SPLITS_RELAY_URL": self.splits_relay_url,
            "ADMIN_ADDRESS": self.admin_address,
        }
        return [name for name, value in required.items() if not value]
