"""
Bounded-concurrency enrichment of transfer records with block hash and revert rate.
"""

from conflux_wallet.enrichment.enricher import BatchEnricher, enrich_records, wave_bounds

__all__ = ["BatchEnricher", "enrich_records", "wave_bounds"]
