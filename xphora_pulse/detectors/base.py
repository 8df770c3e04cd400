class Detector:
    """
    One pattern analysis over a buffer snapshot.

    Subclasses implement `detect(events, now)` and return a list of
    `PredictiveInsight`; an empty or non-qualifying snapshot yields [].
    """

    name = "detector"

    async def detect(self, events, now):
        raise NotImplementedError


def insight_id(prefix, key, now):
    return f"{prefix}_{key}_{int(now.timestamp() * 1000)}"
