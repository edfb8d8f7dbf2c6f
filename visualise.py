import cv2
import matplotlib.pyplot as plt


COMPLETE_COLOR = (0, 200, 0)
INCOMPLETE_COLOR = (0, 50, 250)
SELECTED_COLOR = (255, 100, 0)


def _pin_color(pair, selected_id):
    if pair.id == selected_id:
        return SELECTED_COLOR
    return COMPLETE_COLOR if pair.is_complete else INCOMPLETE_COLOR


def draw_pairs(img, pairs, residuals=None, selected_id=None):
    """Draw a pin for every pair with a source point on a copy of the image.

    Complete pairs are green, source-only pairs red, the selected pair blue.
    Labels carry the pair id and, when residuals are given, the fit error.
    """
    result = img.copy()
    errors = {r.pair_id: r.error for r in residuals} if residuals else {}
    for pair in pairs:
        if pair.source is None:
            continue
        x, y = int(round(pair.source.x)), int(round(pair.source.y))
        color = _pin_color(pair, selected_id)
        cv2.circle(result, (x, y), 10, color, 2)
        cv2.circle(result, (x, y), 2, color, -1)
        label = f"#{pair.id}"
        if pair.id in errors:
            label += f" {errors[pair.id]:.1f}m"
        cv2.putText(result, label, (x + 12, y - 5),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.4, color, 1)
    return result


def plot_residuals(fit):
    """Bar chart of per-pair residuals with the RMS error marked."""
    if not fit.is_solved:
        print(f"No residuals to plot ({fit.status}).")
        return None

    fig, ax = plt.subplots(figsize=(8, 4))
    labels = [f"#{r.pair_id}" for r in fit.residuals]
    ax.bar(labels, [r.error for r in fit.residuals], color="tab:blue")
    ax.axhline(fit.rms_error, color="tab:red", linestyle="--",
               label=f"RMS {fit.rms_error:.2f} m")
    ax.set_xlabel("Pair")
    ax.set_ylabel("Residual (m)")
    ax.set_title("Georeferencing Residuals")
    ax.legend()
    fig.tight_layout()
    return fig


def show_result(img, pairs, fit, window_name="Georeferenced Pairs"):
    """Display the pairs and their residuals in an OpenCV window."""
    residuals = fit.residuals if fit.is_solved else None
    result = draw_pairs(img, pairs, residuals)
    cv2.putText(result, fit.status_text(), (10, 30),
                cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
    cv2.imshow(window_name, result)
    cv2.waitKey(0)
    cv2.destroyAllWindows()
