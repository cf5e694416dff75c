"""
End-to-end checks of the three reference networks on a 1,030-row dataset.

TestReferencePipeline always runs, on a synthetic frame with the published
dataset's shape. TestReferenceResults needs the published concrete CSV and
is skipped unless it is found at CONCRETE_DATA_PATH or data/concrete.csv.
"""

import os
import shutil
import tempfile
import unittest

from concrete_strength.config.constants import DEFAULT_DATA_PATH, REFERENCE_TRAIN_ROWS
from concrete_strength.data_preparation.data_processor import DataProcessor
from concrete_strength.modeling.evaluator import evaluate
from concrete_strength.modeling.model_trainer import ModelTrainer, DEFAULT_CONFIGS
from concrete_strength.modeling.neural_network import NeuralNetworkTrainer
from tests.helpers import make_concrete_frame

DATA_PATH = os.getenv("CONCRETE_DATA_PATH", DEFAULT_DATA_PATH)
TOLERANCE = 0.02
DATASET_ROWS = 1030


class TestReferencePipeline(unittest.TestCase):
    """The reference split and configurations, run on synthetic data."""

    @classmethod
    def setUpClass(cls):
        cls.tmp_dir = tempfile.mkdtemp()
        data_path = os.path.join(cls.tmp_dir, 'concrete.csv')
        make_concrete_frame(n_rows=DATASET_ROWS, seed=21).to_csv(data_path, index=False)
        cls.prepared = DataProcessor(data_path).prepare_data(train_size=REFERENCE_TRAIN_ROWS)
        model_trainer = ModelTrainer(trainer=NeuralNetworkTrainer(stepmax=2000),
                                     random_state=12345)
        cls.result = model_trainer.run(cls.prepared, save_output=False)

    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(cls.tmp_dir)

    def test_split_sizes(self):
        self.assertEqual(len(self.prepared.split.train), 773)
        self.assertEqual(len(self.prepared.split.test), 257)
        self.assertEqual(list(self.prepared.split.test.index), list(range(773, DATASET_ROWS)))

    def test_every_configuration_is_evaluated(self):
        results = self.result.results
        self.assertEqual(list(results['model']), [c.name for c in DEFAULT_CONFIGS])
        self.assertTrue(((results['correlation'] > 0.85) & (results['correlation'] <= 1.0)).all())
        self.assertTrue((results['iterations'] <= 2000).all())

    def test_best_model_table(self):
        table = self.result.best_predictions
        self.assertEqual(len(table), 257)
        self.assertFalse(table.isna().any().any())


@unittest.skipUnless(os.path.exists(DATA_PATH), f"concrete dataset not found at {DATA_PATH}")
class TestReferenceResults(unittest.TestCase):
    """Held-out correlations of the three reference networks."""

    @classmethod
    def setUpClass(cls):
        processor = DataProcessor(DATA_PATH)
        cls.prepared = processor.prepare_data(train_size=REFERENCE_TRAIN_ROWS)
        cls.trainer = NeuralNetworkTrainer()

    def _correlation(self, topology, activation):
        model = self.trainer.train(self.prepared.X_train, self.prepared.y_train,
                                   topology=topology, activation=activation, seed=12345)
        result = evaluate(model, self.prepared.X_test, self.prepared.y_test, self.prepared.params)
        self.assertAlmostEqual(result.correlation, result.correlation_original_scale, places=10)
        return result.correlation

    def test_split_sizes(self):
        self.assertEqual(len(self.prepared.split.train), 773)
        self.assertEqual(len(self.prepared.split.test), 257)
        self.assertEqual(len(DataProcessor(DATA_PATH).split(self.prepared.normalized).train), 772)

    def test_single_hidden_node(self):
        self.assertAlmostEqual(self._correlation((1,), 'logistic'), 0.80, delta=TOLERANCE)

    def test_five_hidden_nodes(self):
        self.assertAlmostEqual(self._correlation((5,), 'logistic'), 0.92, delta=TOLERANCE)

    def test_two_layers_softplus(self):
        r = self._correlation((5, 5), 'softplus')
        self.assertGreaterEqual(r, 0.93 - TOLERANCE)
        self.assertLessEqual(r, 0.94 + TOLERANCE)


if __name__ == '__main__':
    unittest.main()
