"""Seed data for the offline quote simulator."""

# Realistic starting values for the top assets by market cap (as of project creation).
# Ids match CoinMarketCap ids so the client behaves the same against either source.
SEED_ASSETS: list[dict] = [
    {"id": 1, "name": "Bitcoin", "symbol": "BTC", "price": 67250.00, "supply": 19_700_000},
    {"id": 1027, "name": "Ethereum", "symbol": "ETH", "price": 3480.00, "supply": 120_100_000},
    {"id": 825, "name": "Tether USDt", "symbol": "USDT", "price": 1.00, "supply": 112_000_000_000},
    {"id": 1839, "name": "BNB", "symbol": "BNB", "price": 585.00, "supply": 147_600_000},
    {"id": 5426, "name": "Solana", "symbol": "SOL", "price": 148.00, "supply": 463_000_000},
    {"id": 3408, "name": "USDC", "symbol": "USDC", "price": 1.00, "supply": 33_000_000_000},
    {"id": 52, "name": "XRP", "symbol": "XRP", "price": 0.52, "supply": 55_600_000_000},
    {"id": 74, "name": "Dogecoin", "symbol": "DOGE", "price": 0.15, "supply": 145_000_000_000},
    {"id": 2010, "name": "Cardano", "symbol": "ADA", "price": 0.45, "supply": 35_700_000_000},
    {"id": 5805, "name": "Avalanche", "symbol": "AVAX", "price": 35.00, "supply": 394_000_000},
]

# Annualized volatility per symbol (higher = larger percent changes)
ASSET_SIGMA: dict[str, float] = {
    "BTC": 0.55,
    "ETH": 0.65,
    "USDT": 0.005,  # Stablecoin
    "BNB": 0.60,
    "SOL": 0.90,
    "USDC": 0.005,  # Stablecoin
    "XRP": 0.80,
    "DOGE": 1.10,  # Meme coin, very volatile
    "ADA": 0.85,
    "AVAX": 0.95,
}

DEFAULT_SIGMA = 0.80

# Fraction of the 24h traded value relative to market cap
VOLUME_TO_MCAP = 0.04

LOGO_URL = "https://s2.coinmarketcap.com/static/img/coins/64x64/{id}.png"
