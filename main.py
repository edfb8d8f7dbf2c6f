import cv2
import matplotlib.pyplot as plt

import config
from georef import solve
from pairs_io import export_pairs, load_pairs
from visualise import plot_residuals, show_result


def main():
    # Load pairs
    print(f"Loading pairs from {config.PAIRS_FILE}...")
    pairs, meters_per_pixel = load_pairs(config.PAIRS_FILE)
    if meters_per_pixel is None:
        meters_per_pixel = config.METERS_PER_PIXEL
        print(f"  No scale in pairs file, using {meters_per_pixel} m/px")
    complete = sum(1 for p in pairs if p.is_complete)
    print(f"Loaded {len(pairs)} pair(s), {complete} complete")

    # Fit affine georeferencing
    fit = solve(pairs, meters_per_pixel)
    fit.report()

    # Export pairs
    export_pairs(pairs, meters_per_pixel, config.EXPORT_FILE)
    print(f"Pairs exported to {config.EXPORT_FILE}")

    # Visualize
    if config.PLOT_RESIDUALS and fit.is_solved:
        plot_residuals(fit)
        plt.show()

    if config.DISPLAY_RESULT:
        img = cv2.imread(config.MAP_IMAGE_PATH)
        if img is not None:
            show_result(img, pairs, fit)
        else:
            print(f"Could not load map image from {config.MAP_IMAGE_PATH}")


if __name__ == "__main__":
    main()
