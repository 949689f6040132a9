# helpers/logger.py
import numpy as np
import csv, json, datetime, pathlib
import matplotlib.pyplot as plt
import matplotlib.cm as colormap


class RunLogger:
    def __init__(self, root="runs", tag="run"):
        ts = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
        self.root = pathlib.Path(root)
        self.dir = self.root / f"{tag}_{ts}"
        self.dir.mkdir(parents=True, exist_ok=True)
        self.csv_path = self.dir / "history.csv"
        self.json_path = self.dir / "history.json"
        self.best_ckpt = self.dir / "checkpoint_best.npz"
        self.last_ckpt = self.dir / "checkpoint_last.npz"
        self.metrics = []  # list of dicts per epoch
        self._csv_header_written = False

    # ---------- logging ----------
    def log_epoch(self, epoch, **kwargs):
        row = {"epoch": int(epoch), **{k: float(v) for k, v in kwargs.items()}}
        self.metrics.append(row)
        with open(self.csv_path, "a", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=list(row.keys()))
            if not self._csv_header_written:
                writer.writeheader()
                self._csv_header_written = True
            writer.writerow(row)

    def save_json(self):
        with open(self.json_path, "w") as f:
            json.dump(self.metrics, f, indent=2)

    def save_checkpoint(self, npz_dict, best=False):
        path = self.best_ckpt if best else self.last_ckpt
        np.savez(path, **npz_dict)
        return str(path)

    # ---------- plotting ----------
    def _plots_dir(self, subdir):
        out = self.dir / subdir
        out.mkdir(parents=True, exist_ok=True)
        return out

    def plot_loss(self, history, tag="run", subdir="plots"):
        """
        Saves cross-entropy curves as loss_curve_<tag>_epochs_<n>.png.
        Uses history keys 'loss' and 'val_loss' when present.
        """
        train = history.get("loss", [])
        val = history.get("val_loss", [])
        total_epochs = max(len(train), len(val))

        outdir = self._plots_dir(subdir)
        plt.figure()
        if len(train) > 0:
            plt.plot(train, label="train loss")
        if len(val) > 0:
            plt.plot(val, label="val loss")
        plt.xlabel("Epoch")
        plt.ylabel("Cross-Entropy Loss")
        plt.title(f"Loss vs Epochs ({tag})")
        if len(train) > 0 or len(val) > 0:
            plt.legend()
        plt.tight_layout()
        path = outdir / f"loss_curve_{tag}_epochs_{total_epochs}.png"
        plt.savefig(path, dpi=160)
        plt.close()
        return str(path)

    def plot_val_metrics(self, history, tag="run", subdir="plots"):
        """
        Saves validation misclassification curve if 'val_misclass' is present.
        """
        val_misclass = history.get("val_misclass", [])
        if len(val_misclass) == 0:
            return None
        outdir = self._plots_dir(subdir)
        plt.figure()
        plt.plot(val_misclass, label="val misclassification")
        plt.xlabel("Epoch")
        plt.ylabel("Misclassification rate")
        plt.title(f"Validation Misclassification vs Epochs ({tag})")
        plt.legend()
        plt.tight_layout()
        path = outdir / f"val_metrics_{tag}_epochs_{len(val_misclass)}.png"
        plt.savefig(path, dpi=160)
        plt.close()
        return str(path)

    def plot_confusion_matrix(self, cm, tag="run", subdir="plots", class_names=None):
        """
        Saves confusion matrix heatmap as confusion_matrix_<tag>.png
        cm: (num_classes, num_classes) integer matrix
        """
        outdir = self._plots_dir(subdir)
        plt.figure(figsize=(6, 5))
        plt.imshow(cm, interpolation="nearest", cmap=colormap.Blues)
        plt.title(f"Confusion Matrix ({tag})")
        plt.colorbar()
        n_classes = cm.shape[0]
        ticks = np.arange(n_classes)
        if class_names is None:
            class_names = ticks
        plt.xticks(ticks, class_names, rotation=0)
        plt.yticks(ticks, class_names)

        thresh = cm.max() / 2.0 if cm.size > 0 else 0
        for i, j in np.ndindex(cm.shape):
            plt.text(
                j, i, format(cm[i, j], "d"),
                horizontalalignment="center",
                color="white" if cm[i, j] > thresh else "black",
            )

        plt.ylabel("True label")
        plt.xlabel("Predicted label")
        plt.tight_layout()
        path = outdir / f"confusion_matrix_{tag}.png"
        plt.savefig(path, dpi=160)
        plt.close()
        return str(path)

    def plot_all(self, history, tag="run", subdir="plots"):
        self.plot_loss(history, tag=tag, subdir=subdir)
        self.plot_val_metrics(history, tag=tag, subdir=subdir)

    # ---------- metrics calculation ----------
    def calculate_metrics_from_predictions(self, y_true, y_pred, num_classes, eps=1e-12):
        """
        Calculate misclassification rate and macro precision/recall/F1.

        Args:
            y_true: array of true class labels (integers)
            y_pred: array of predicted class labels (integers)
            num_classes: number of classes
            eps: small value to avoid division by zero

        Returns:
            dict with metrics and confusion matrix
        """
        cm = np.zeros((num_classes, num_classes), dtype=np.int64)
        for true_label, pred_label in zip(y_true, y_pred):
            cm[int(true_label), int(pred_label)] += 1

        tp = np.diag(cm).astype(np.float64)
        fp = cm.sum(axis=0) - tp
        fn = cm.sum(axis=1) - tp

        precision = tp / (tp + fp + eps)
        recall = tp / (tp + fn + eps)
        f1 = 2 * precision * recall / (precision + recall + eps)
        accuracy = tp.sum() / max(cm.sum(), 1)

        return {
            'misclass': float(1.0 - accuracy),
            'macro_precision': float(precision.mean()),
            'macro_recall': float(recall.mean()),
            'macro_f1': float(f1.mean()),
            'precision_per_class': precision.tolist(),
            'recall_per_class': recall.tolist(),
            'f1_per_class': f1.tolist(),
            'confusion_matrix': cm,
        }

    def save_metrics_summary(self, metrics, tag="run", filename="metrics_summary.json"):
        summary = {
            'experiment_tag': tag,
            'timestamp': datetime.datetime.now().isoformat(),
            'overall_metrics': {
                'misclass': metrics.get('misclass', 0.0),
                'macro_precision': metrics.get('macro_precision', 0.0),
                'macro_recall': metrics.get('macro_recall', 0.0),
                'macro_f1': metrics.get('macro_f1', 0.0)
            },
            'per_class_metrics': {
                'precision': metrics.get('precision_per_class', []),
                'recall': metrics.get('recall_per_class', []),
                'f1': metrics.get('f1_per_class', [])
            }
        }

        if 'confusion_matrix' in metrics:
            summary['confusion_matrix'] = np.asarray(metrics['confusion_matrix']).tolist()

        output_path = self.dir / filename
        with open(output_path, 'w') as f:
            json.dump(summary, f, indent=2)

        return str(output_path)
