from price_fetcher.schemas.api import StockGroup

STOCK_GROUPS: dict[str, StockGroup] = {
    "tech": StockGroup(
        name="Tech Giants",
        symbols=["AAPL", "MSFT", "GOOGL", "META", "NVDA", "NFLX", "AMZN", "TSLA"],
        description="Major technology companies",
    ),
    "finance": StockGroup(
        name="Financial Sector",
        symbols=["JPM", "BAC", "WFC", "GS", "MS", "C", "AXP", "V"],
        description="Banking and financial services",
    ),
    "healthcare": StockGroup(
        name="Healthcare",
        symbols=["JNJ", "PFE", "UNH", "ABBV", "MRK", "TMO", "ABT", "LLY"],
        description="Pharmaceutical and healthcare companies",
    ),
    "energy": StockGroup(
        name="Energy Sector",
        symbols=["XOM", "CVX", "COP", "EOG", "SLB", "KMI", "PSX", "VLO"],
        description="Oil, gas, and energy companies",
    ),
    "retail": StockGroup(
        name="Retail & Consumer",
        symbols=["WMT", "TGT", "COST", "HD", "LOW", "NKE", "SBUX", "MCD"],
        description="Retail and consumer goods",
    ),
    "crypto": StockGroup(
        name="Crypto-Related",
        symbols=["COIN", "MSTR", "RIOT", "MARA", "HUT", "BITF", "CAN", "HIVE"],
        description="Cryptocurrency and blockchain companies",
    ),
}


def list_groups() -> dict[str, dict]:
    return {key: group.model_dump() for key, group in STOCK_GROUPS.items()}
