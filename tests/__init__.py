"""
Test suite for the resume screener.

All tests run without network access or API keys:

    # Run all tests
    python -m pytest tests/ -v

    # Run only the pipeline tests
    python -m pytest tests/unit/pipeline -v
"""
