from prometheus_client import Counter, Histogram


class ConferenceMetrics:
    """
    Conference Central Core Metrics Collector

    Tracks registration/wishlist transaction outcomes and store conflicts
    """

    def __init__(self):
        # ========== Registration Business Metrics ==========
        self.registration_requests = Counter(
            'conference_registration_requests_total',
            'Total registration transactions',
            ['operation', 'result', 'reason'],  # operation: register/unregister
        )

        self.registration_duration = Histogram(
            'conference_registration_duration_seconds',
            'Registration transaction duration',
            ['operation'],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0],
        )

        self.wishlist_requests = Counter(
            'session_wishlist_requests_total',
            'Total wishlist transactions',
            ['operation', 'result', 'reason'],  # operation: add/remove
        )

        # ========== Store Metrics ==========
        self.transaction_conflicts = Counter(
            'entity_store_transaction_conflicts_total',
            'Optimistic transaction conflicts',
            ['store'],
        )

        self.composed_queries = Counter(
            'query_composer_queries_total',
            'Native queries issued per composed query',
            ['kind', 'stage'],  # stage: primary/intersect/subtract
        )

    # ========== Helper Methods ==========

    def record_registration(self, *, operation: str, result: str, reason: str, duration: float):
        self.registration_requests.labels(operation=operation, result=result, reason=reason).inc()
        self.registration_duration.labels(operation=operation).observe(duration)

    def record_wishlist(self, *, operation: str, result: str, reason: str):
        self.wishlist_requests.labels(operation=operation, result=result, reason=reason).inc()

    def record_transaction_conflict(self, *, store: str):
        self.transaction_conflicts.labels(store=store).inc()

    def record_composed_query(self, *, kind: str, stage: str):
        self.composed_queries.labels(kind=kind, stage=stage).inc()


# Global metrics instance
metrics = ConferenceMetrics()
