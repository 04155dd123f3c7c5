"""HTTP routers for the HousePricePro API."""
