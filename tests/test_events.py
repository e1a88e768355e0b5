import json
import math

from pewma.models.events import Status, Verdict


def test_verdict_to_dict_is_strict_json() -> None:
    verdict = Verdict(
        index=7,
        value=3.0,
        status=Status.IN_ORDINARY,
        density=math.nan,
        mean=1.0,
        std_deviation=math.inf,
        alpha=0.9,
    )
    payload = json.loads(json.dumps(verdict.to_dict(), allow_nan=False))
    assert payload["status"] == "in_ordinary"
    assert payload["density"] is None
    assert payload["std_deviation"] is None
    assert payload["mean"] == 1.0
    assert not verdict.is_outlier
