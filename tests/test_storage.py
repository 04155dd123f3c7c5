"""
Storage Tests
"""

import re
import threading

import pytest

from house_price_pro.models import InsertPrediction
from house_price_pro.storage import MemStorage, generate_id


@pytest.fixture
def storage():
    return MemStorage()


def make_insert(property_id: str) -> InsertPrediction:
    return InsertPrediction(
        property_id=property_id,
        estimated_price=950000,
        confidence=0.82,
        lower_bound=870000,
        upper_bound=1030000,
    )


class TestMemStorage:
    def test_generate_id_format(self):
        assert re.fullmatch(r"pred-\d{8}-\d{6}-[0-9a-f]{8}", generate_id("pred"))

    def test_create_property(self, storage, sample_features):
        prop = storage.create_property(sample_features)
        assert prop.id.startswith("prop-")
        assert prop.created_at is not None
        assert prop.sqft == sample_features.sqft
        assert storage.get_property(prop.id) == prop

    def test_create_prediction_references_property(self, storage, sample_features):
        prop = storage.create_property(sample_features)
        stored = storage.create_prediction(make_insert(prop.id))
        assert stored.id.startswith("pred-")
        assert stored.property_id == prop.id
        assert storage.get_prediction(stored.id) == stored
        assert storage.list_predictions(property_id=prop.id) == [stored]

    def test_prediction_for_unknown_property_rejected(self, storage):
        with pytest.raises(KeyError):
            storage.create_prediction(make_insert("prop-missing"))
        assert storage.counts() == (0, 0)

    def test_missing_records(self, storage):
        assert storage.get_property("nope") is None
        assert storage.get_prediction("nope") is None
        assert storage.list_predictions() == []

    def test_concurrent_writes(self, storage, sample_features):
        def worker():
            for _ in range(50):
                prop = storage.create_property(sample_features)
                storage.create_prediction(make_insert(prop.id))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert storage.counts() == (200, 200)
