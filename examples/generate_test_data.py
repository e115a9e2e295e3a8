import csv
import os
import random

# Gene expression changes of seven cell types, control and after
# LPS challenge, laid out like a spreadsheet export: six rows of notes
# before the data and no header row.
CELL_TYPES = ["B", "MF", "NK", "Mo", "pDC", "DC1", "DC2"]
PREFIXES = ["Il", "Cxcl", "Ccl", "Tnf", "Ifit", "Irf", "Stat", "Nfkb", "Cd", "Gbp"]

if not os.path.exists("data"):
    os.mkdir("data")

if not os.path.exists("data/lps.csv"):
    rng = random.Random(2014)
    ncols = 2 + 2 * len(CELL_TYPES)
    notes = [
        "Table S3",
        "log expression of genes in cell types, control and LPS challenge",
        "",
        "Source: single cell RNA-seq",
        "",
        "gene / cell type",
    ]

    genes = set()
    while len(genes) < 300:
        genes.add(f"{rng.choice(PREFIXES)}{rng.randint(1, 30)}")

    rows = []
    for gene in sorted(genes):
        row = [gene]
        for _ in CELL_TYPES:
            ctrl = round(rng.uniform(0, 8), 3)
            response = rng.choice([0.0, 0.0, 0.0, rng.uniform(-4, 6)])
            row += [ctrl, round(ctrl + response + rng.gauss(0, 0.3), 3)]
        row.append(rng.randint(1, 12))
        rows.append(row)

    with open("data/lps.csv", "w", newline="") as f:
        writer = csv.writer(f)
        for note in notes:
            writer.writerow([note] + [""] * (ncols - 1))
        writer.writerows(rows)
