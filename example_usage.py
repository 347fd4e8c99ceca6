"""
Menh Scoring Engine - Usage Examples
====================================
This file demonstrates how to use the engine
both programmatically and via the API.
"""

SAMPLE_NUMBERS = """
0912 345 678
0987.654.321
0966-282-828
not a number
0352868686
0975112233
0912345678
"""


# =============================================================================
# EXAMPLE 1: Direct Engine Usage (Programmatic)
# =============================================================================

def example_direct_usage():
    """Use the engine directly in Python code"""
    from menh_engine.engine import NumberAnalysisEngine
    from menh_engine.models.analysis_config import create_default_analysis_config

    config = create_default_analysis_config(user_menh="Kim")
    engine = NumberAnalysisEngine(config)

    print("=" * 60)
    print("RANKING NUMBERS FOR MENH: Kim")
    print("=" * 60)

    batch = engine.analyze_batch(SAMPLE_NUMBERS)

    print(f"\nLines: {batch.processed}  Parsed: {batch.parsed}  Passed: {batch.passed}")
    for reason, count in batch.rejected_by.items():
        print(f"  - rejected by {reason}: {count}")

    print("\n--- Ranking ---")
    for rank, result in enumerate(batch.results, start=1):
        print(f"  {rank}. {result.number}  score={result.score:.2f}")

    print(f"\nProcessing Time: {batch.processing_time_ms:.2f}ms")

    return batch


# =============================================================================
# EXAMPLE 2: Quick Check
# =============================================================================

def example_quick_check():
    """Check single numbers and see why they fail"""
    from menh_engine.engine import NumberAnalysisEngine
    from menh_engine.models.analysis_config import create_default_analysis_config

    engine = NumberAnalysisEngine(create_default_analysis_config(user_menh="Thủy"))

    for number in ["0966282828", "0912345678", "12345"]:
        result = engine.quick_check(number)
        if result.kind == "Valid":
            print(f"  {number}: valid, score {result.score:.2f}")
        else:
            print(f"  {number}: invalid ({result.reason}) {result.detail or ''}")


# =============================================================================
# EXAMPLE 3: Custom Configuration
# =============================================================================

def example_custom_config():
    """Relax thresholds, add custom rules and switch on the score terms"""
    from menh_engine import analyze, format_results
    from menh_engine.models.analysis_config import create_default_analysis_config

    config = create_default_analysis_config(
        user_menh="Hoa",
        mode="AbsoluteBalance",
        overrides={
            "filter_khac_max": 3,
            "filter_sinh_min": 0,
            "filter_cung_min": 0,
            "toggle_static_balance": True,
            "toggle_completeness": True,
            "toggle_prefix_filter": True,
            "prefix_value": "09",
            "toggle_blacklist_filter": True,
            "blacklist_digits": "4",
        },
    )

    results = analyze(SAMPLE_NUMBERS, config)
    print(format_results(results) or "  (no numbers passed)")


# =============================================================================
# EXAMPLE 4: API Usage
# =============================================================================

def example_api_usage():
    """Example API calls (requires server running)"""
    BASE_URL = "http://localhost:8000"

    print("Start the server with: python main.py serve")
    print(f"  GET  {BASE_URL}/api/config/defaults?user_menh=Kim")
    print(f"  POST {BASE_URL}/api/analyze       {{'raw_text': ..., 'config': ...}}")
    print(f"  POST {BASE_URL}/api/quick-check   {{'number': ..., 'config': ...}}")

    # Uncomment to actually make the request:
    # import httpx
    # config = httpx.get(f"{BASE_URL}/api/config/defaults", params={"user_menh": "Kim"}).json()
    # response = httpx.post(f"{BASE_URL}/api/analyze", json={"raw_text": SAMPLE_NUMBERS, "config": config})
    # print(f"\nResponse: {response.json()}")


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("MENH SCORING ENGINE - USAGE EXAMPLES")
    print("=" * 60 + "\n")

    print("\n[Example 1: Direct Usage]")
    example_direct_usage()

    print("\n" + "-" * 60)
    print("\n[Example 2: Quick Check]")
    example_quick_check()

    print("\n" + "-" * 60)
    print("\n[Example 3: Custom Configuration]")
    example_custom_config()

    print("\n" + "-" * 60)
    print("\n[Example 4: API Usage]")
    example_api_usage()

    print("\n" + "=" * 60)
    print("EXAMPLES COMPLETE")
    print("=" * 60)
