"""
Application services layer (use cases).

Services orchestrate the domain logic to fulfill application use cases.
They depend on ports (interfaces) from core/, never on concrete
implementations from adapters/.

This layer contains:
- catalog_enricher: the enrichment driver (eligibility, counters, progress)
- pacing: fixed-interval ticker between API calls
- retry: rate-limit / transport retry policy (tenacity)
- pipeline: load -> enrich -> persist orchestration
- reporting: coverage and run summary
"""
