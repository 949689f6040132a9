import csv, os, datetime as dt

from feedforward import MultiClassNN, PlainLinearLayer
from feedforward.helpers.data import read_data, split_inputs_labels
from feedforward.helpers.labels import to_indices_labels
from feedforward.helpers.logger import RunLogger

DATA_PATH = "./data/iris_data_files/"
FILENAMES = ("iris_training.dat", "iris_validation.dat", "iris_test.dat")
NUM_CLASSES = 3


def _ensure_parent_dir(path: str):
    os.makedirs(os.path.dirname(path), exist_ok=True)

def _append_row(csv_path: str, header: list, row: list):
    _ensure_parent_dir(csv_path)
    file_exists = os.path.isfile(csv_path)
    with open(csv_path, "a", newline="") as f:
        w = csv.writer(f)
        if not file_exists:
            w.writerow(header)
        w.writerow(row)


def load_iris_tables(data_path=DATA_PATH):
    # train / validation / test, each split into (inputs, one-hot labels)
    return [
        split_inputs_labels(read_data(os.path.join(data_path, name)), NUM_CLASSES)
        for name in FILENAMES
    ]


if __name__ == "__main__":
    (X_train, Y_train), (X_val, Y_val), (X_test, Y_test) = load_iris_tables()

    # Hyperparameters
    hidden_size = 4
    max_weight = 1.0
    learning_rate = 0.1
    decay_rate = 0.1
    patience = 3

    hidden_layer = PlainLinearLayer(X_train.shape[1], hidden_size, max_weight)
    output_layer = PlainLinearLayer(hidden_size, NUM_CLASSES, max_weight)

    model = MultiClassNN(X_train, Y_train, output_layer)
    model.push_layer(hidden_layer)

    tag = "iris"
    history = model.fit(
        X_val,
        Y_val,
        lr=learning_rate,
        decay_rate=decay_rate,
        patience=patience,
        tag=tag,
        runs_root="runs",
    )

    test_loss, test_misclass = model.test(X_test, Y_test)
    print("Test misclass. loss:", test_misclass)
    print("Test cross-entropy:", test_loss)

    # ===== SAVE RESULTS =====
    logger = RunLogger(root="results", tag=tag)
    metrics = logger.calculate_metrics_from_predictions(
        to_indices_labels(Y_test), model.predict(X_test), num_classes=NUM_CLASSES
    )
    logger.save_metrics_summary(metrics, tag=tag)
    logger.plot_all(history, tag=tag)
    logger.plot_confusion_matrix(metrics["confusion_matrix"], tag=tag)

    _append_row(
        "results/results_summary.csv",
        ["timestamp", "epochs", "hidden_size", "lr", "decay_rate",
         "val_loss_last", "test_loss", "test_misclass", "macro_f1"],
        [dt.datetime.now().strftime("%Y-%m-%d %H:%M:%S"), len(history["loss"]), hidden_size,
         learning_rate, decay_rate, history["val_loss"][-1], test_loss, test_misclass,
         metrics["macro_f1"]],
    )
    print("Macro F1:", metrics["macro_f1"])
    print("Confusion matrix:\n", metrics["confusion_matrix"])
