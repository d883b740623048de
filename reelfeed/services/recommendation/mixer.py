from reelfeed.models.video import CandidateVideo


class FeedMixer:
    """
    Interleaves the ranked Discovery and Comfort lists at a target ratio.

    Greedy: take from Discovery whenever its share of the output (counting
    the slot about to be filled) is still below the ratio. When one list
    runs out, the other is drained. Ids already emitted are skipped.
    """

    def __init__(self, discovery_ratio: float = 0.65):
        if not 0.0 < discovery_ratio < 1.0:
            raise ValueError(f"discovery_ratio must be in (0, 1), got {discovery_ratio}")
        self.discovery_ratio = discovery_ratio

    def mix(self, discovery: list[CandidateVideo], comfort: list[CandidateVideo]) -> list[CandidateVideo]:
        result: list[CandidateVideo] = []
        seen: set[str] = set()
        idx_d = idx_c = 0
        emitted_d = 0

        while idx_d < len(discovery) or idx_c < len(comfort):
            if idx_d < len(discovery) and idx_c < len(comfort):
                pick_discovery = emitted_d / (len(result) + 1) < self.discovery_ratio
            else:
                pick_discovery = idx_d < len(discovery)

            if pick_discovery:
                video = discovery[idx_d]
                idx_d += 1
            else:
                video = comfort[idx_c]
                idx_c += 1

            if video.id in seen:
                continue
            seen.add(video.id)
            result.append(video)
            if pick_discovery:
                emitted_d += 1

        return result
