# huffman-lab
# experiments.py

"""
Huffman coding experiments: in-memory vs streaming pipelines

Runs repeated compress/decompress experiments over synthetic datasets and
(optionally) real files, to check correctness and measure speed and ratio

Outputs (in --outdir):
  - metrics.csv     (raw row per run per configuration)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)
  - <name>_compressed.bin / <name>_decompressed.<ext> for every --files entry

How to run:
  python experiments.py --outdir results --runs 3
  python experiments.py --outdir results --runs 5 --exp1_size_kb 512 --exp2_max_kb 4096
  python experiments.py --outdir results --no_exp1 --no_exp2 --files inputs/test.txt,inputs/empty.txt --show_tree

Notes:
  The compressed artifacts have no header. They can only be decoded in the same
  run, with the tree kept in memory, so every file is round-tripped immediately
"""

from __future__ import annotations

import argparse
import csv
import filecmp
import math
import random
import statistics
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

# Our implementations
import compressor as comp
import huffman as huff

PIPELINES = ("memory", "stream")


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def shannon_entropy(ft: Dict[int, int]) -> float:
    """
    Bits per symbol lower bound for a static code over this frequency table
    """
    total = sum(ft.values())
    if total == 0:
        return 0.0
    return -sum((f / total) * math.log2(f / total) for f in ft.values())

def compressed_path_for(path: Path, outdir: Path) -> Path:
    return outdir / f"{path.stem}_compressed.bin"

def decompressed_path_for(path: Path, outdir: Path) -> Path:
    return outdir / f"{path.stem}_decompressed{path.suffix}"


# Synthetic dataset generators

def gen_uniform(size: int, alphabet: int = 256, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.randrange(0, alphabet) for _ in range(size))

def gen_repetitive(size: int, dominant: int = ord('A'), dom_frac: float = 0.90, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    other_symbols = [i for i in range(256) if i != dominant]
    out = bytearray()
    for _ in range(size):
        if rng.random() < dom_frac:
            out.append(dominant)
        else:
            out.append(rng.choice(other_symbols))
    return bytes(out)

def _sample_cdf(rng: random.Random, cdf: List[float]) -> int:
    r = rng.random()
    lo, hi = 0, len(cdf) - 1
    while lo < hi:
        mid = (lo + hi) // 2
        if r <= cdf[mid]:
            hi = mid
        else:
            lo = mid + 1
    return lo

def _cdf(weights: List[float]) -> List[float]:
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)
    return cdf

def gen_zipf_like(size: int, alphabet: int = 128, s: float = 1.2, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    cdf = _cdf([1.0 / ((i + 1) ** s) for i in range(alphabet)])
    return bytes(_sample_cdf(rng, cdf) for _ in range(size))

def gen_english_like(size: int, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    chars = (
        " etaoinshrdlcumwfgypbvkjxq"
        "ETAOINSHRDLCUMWFGYPBVKJXQ"
        "\n"
    )
    weights = []
    for ch in chars:
        if ch == ' ':
            weights.append(13.0)
        elif ch == '\n':
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)

    cdf = _cdf(weights)
    return bytes(ord(chars[_sample_cdf(rng, cdf)]) for _ in range(size))

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], bytes]] = {
    "uniform256": lambda size, seed: gen_uniform(size, alphabet=256, seed=seed),
    "uniform128": lambda size, seed: gen_uniform(size, alphabet=128, seed=seed),
    "zipf128": lambda size, seed: gen_zipf_like(size, alphabet=128, s=1.2, seed=seed),
    "zipf64": lambda size, seed: gen_zipf_like(size, alphabet=64, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dominant=ord('A'), dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dominant=ord('A'), dom_frac=0.99, seed=seed),
    "single_symbol": lambda size, seed: b"A" * size,
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
}

def generate_dataset(name: str, size_bytes: int, seed: int) -> Tuple[str, bytes]:
    """
    Unknown generator names are an error, listing the valid ones
    """
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        valid = ", ".join(sorted(GENERATOR_REGISTRY))
        raise ValueError(f"unknown dataset generator {name!r} (choose from {valid})")
    return name, fn(size_bytes, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    file_size_bytes: int
    run_id: int
    pipeline: str  # "memory" or "stream"
    unique_symbols: int

    build_huffman_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    compressed_bytes: int
    pad_bits: int
    compression_ratio: float

    avg_code_length: float
    entropy_bits: float
    correctness_ok: int  # 1 or 0


def _run_memory(data: bytes) -> Tuple[comp.CompressionResult, bytes, float, float, float]:
    # build
    t0 = now_ns()
    ft = huff.count_frequencies(data)
    root, code_map = comp.build_codec(ft)
    t1 = now_ns()

    # encode
    packed, pad_bits = comp.pack_bits_from_codes(data, code_map)
    t2 = now_ns()

    result = comp.CompressionResult(
        root=root,
        code_map=code_map,
        frequency_table=ft,
        bit_length=len(packed) * 8 - pad_bits,
        pad_bits=pad_bits,
        original_size=len(data),
        compressed_size=len(packed),
    )

    # decode
    t3 = now_ns()
    decoded = comp.decompress_bytes(packed, result)
    t4 = now_ns()

    return result, decoded, ns_to_ms(t1 - t0), ns_to_ms(t2 - t1), ns_to_ms(t4 - t3)


def _run_stream(data: bytes) -> Tuple[comp.CompressionResult, bytes, float, float, float]:
    """
    Goes through real files; encode time covers both passes over the input
    (frequency count and encoding) plus tree construction
    """
    with tempfile.TemporaryDirectory() as tmp:
        src = Path(tmp) / "original.bin"
        packed_path = Path(tmp) / "original_compressed.bin"
        out_path = Path(tmp) / "original_decompressed.bin"
        src.write_bytes(data)

        t0 = now_ns()
        result = comp.compress_file(src, packed_path)
        t1 = now_ns()
        comp.decompress_file(packed_path, out_path, result)
        t2 = now_ns()

        decoded = out_path.read_bytes()

    return result, decoded, 0.0, ns_to_ms(t1 - t0), ns_to_ms(t2 - t1)


def run_one(data: bytes, pipeline: str) -> MetricRow:
    if pipeline == "memory":
        result, decoded, build_ms, encode_ms, decode_ms = _run_memory(data)
    elif pipeline == "stream":
        result, decoded, build_ms, encode_ms, decode_ms = _run_stream(data)
    else:
        raise ValueError("pipeline must be 'memory' or 'stream'")

    return MetricRow(
        exp_name="",
        dataset_name="",
        file_size_bytes=len(data),
        run_id=0,
        pipeline=pipeline,
        unique_symbols=result.unique_symbols,
        build_huffman_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_ms + encode_ms + decode_ms,
        compressed_bytes=result.compressed_size,
        pad_bits=result.pad_bits,
        compression_ratio=result.compression_ratio,
        avg_code_length=result.average_code_length,
        entropy_bits=shannon_entropy(result.frequency_table),
        correctness_ok=1 if decoded == data else 0,
    )


def print_codec(result: comp.CompressionResult) -> None:
    print("Frequency map:")
    print(result.frequency_table, "\n")
    print("Huffman tree:")
    print(huff.format_tree(result.root) or "(empty)", "\n")
    print("Code map:")
    print(result.code_map, "\n")
    lengths = huff.code_lengths(result.code_map)
    print("Code lengths (leaves left to right):")
    print([(leaf.symbol, lengths[leaf.symbol]) for leaf in huff.iter_leaves(result.root)], "\n")


def run_files(paths: List[Path], outdir: Path, show_tree: bool = False) -> List[MetricRow]:
    """
    Compresses then decompresses each file into outdir; missing files are reported and skipped
    """
    rows: List[MetricRow] = []
    for path in paths:
        if not path.is_file():
            print(f"File {path} not found!")
            continue

        packed_path = compressed_path_for(path, outdir)
        restored_path = decompressed_path_for(path, outdir)

        t0 = now_ns()
        result = comp.compress_file(path, packed_path)
        t1 = now_ns()
        comp.decompress_file(packed_path, restored_path, result)
        t2 = now_ns()

        if show_tree:
            print_codec(result)

        ok = filecmp.cmp(path, restored_path, shallow=False)
        print(f"{path}: {result.original_size} -> {result.compressed_size} bytes "
              f"(ratio {result.compression_ratio:.3f}, {result.pad_bits} pad bits) "
              f"{'OK' if ok else 'MISMATCH'}")

        rows.append(MetricRow(
            exp_name="exp3_files",
            dataset_name=path.name,
            file_size_bytes=result.original_size,
            run_id=1,
            pipeline="stream",
            unique_symbols=result.unique_symbols,
            build_huffman_ms=0.0,
            encode_ms=ns_to_ms(t1 - t0),
            decode_ms=ns_to_ms(t2 - t1),
            total_ms=ns_to_ms(t2 - t0),
            compressed_bytes=result.compressed_size,
            pad_bits=result.pad_bits,
            compression_ratio=result.compression_ratio,
            avg_code_length=result.average_code_length,
            entropy_bits=shannon_entropy(result.frequency_table),
            correctness_ok=1 if ok else 0,
        ))
    return rows


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, file_size_bytes, pipeline and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int, str], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.file_size_bytes, r.pipeline)
        key_to.setdefault(key, []).append(r)

    metrics = ("compression_ratio", "encode_ms", "decode_ms", "build_huffman_ms", "total_ms", "avg_code_length")
    summary_fields = ["exp_name", "dataset_name", "file_size_bytes", "pipeline", "n_runs"]
    for m in metrics:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields += ["entropy_bits", "correctness_ok_rate"]

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, size_b, pipeline = key
            row = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "file_size_bytes": size_b,
                "pipeline": pipeline,
                "n_runs": len(items),
            }
            for m in metrics:
                row[f"{m}_mean"], row[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            row["entropy_bits"] = statistics.mean(x.entropy_bits for x in items)
            row["correctness_ok_rate"] = sum(x.correctness_ok for x in items) / len(items)
            w.writerow(row)



# Plotting

def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, pipeline: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset and r.pipeline == pipeline]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))

    plt.figure()
    y = [mean_for(d, "memory", "compression_ratio") for d in datasets]
    plt.plot(x, y, marker="o")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Compressed Bytes / Original Bytes")
    plt.title("Experiment 1: Compression Ratio by Distribution")
    plt.tight_layout()
    plt.savefig(outdir / "exp1_compression_ratio.png", dpi=200)
    plt.close()

    plt.figure()
    for p in PIPELINES:
        y = [mean_for(d, p, "encode_ms") for d in datasets]
        plt.plot(x, y, marker="o", label=p)
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Encode Time (ms)")
    plt.title("Experiment 1: Encode Time by Distribution")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_encode_time.png", dpi=200)
    plt.close()

    plt.figure()
    plt.plot(x, [mean_for(d, "memory", "avg_code_length") for d in datasets], marker="o", label="huffman")
    plt.plot(x, [mean_for(d, "memory", "entropy_bits") for d in datasets], marker="x", linestyle="--", label="entropy")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Bits per Symbol")
    plt.title("Experiment 1: Average Code Length vs Entropy")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_code_length.png", dpi=200)
    plt.close()


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    distributions = sorted(set(r.dataset_name for r in exp_rows))

    for dist in distributions:
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.file_size_bytes for r in dist_rows))

        def mean_size(size: int, pipeline: str, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.file_size_bytes == size and r.pipeline == pipeline]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        for p in PIPELINES:
            y = [mean_size(s, p, "encode_ms") for s in sizes]
            plt.plot(sizes, y, marker="o", label=p)
        plt.xlabel("File Size (bytes)")
        plt.ylabel("Encode Time (ms)")
        plt.title(f"Experiment 2: Encode Time vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_encode_time_{dist}.png", dpi=200)
        plt.close()

        plt.figure()
        for p in PIPELINES:
            y = [mean_size(s, p, "decode_ms") for s in sizes]
            plt.plot(sizes, y, marker="o", label=p)
        plt.xlabel("File Size (bytes)")
        plt.ylabel("Decode Time (ms)")
        plt.title(f"Experiment 2: Decode Time vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_decode_time_{dist}.png", dpi=200)
        plt.close()



# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Huffman coding experiments")
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV, plots and file artifacts")
    ap.add_argument("--runs", type=int, default=3, help="Repetitions per configuration (>=3 recommended for timing)")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--no_plots", action="store_true", help="Only write CSV files")

    # Experiment toggles
    ap.add_argument("--no_exp1", action="store_true", help="Disable experiment 1 (distribution)")
    ap.add_argument("--no_exp2", action="store_true", help="Disable experiment 2 (size scaling)")

    # Experiment 1 controls
    ap.add_argument("--exp1_size_kb", type=int, default=256, help="Experiment 1 fixed file size in KB")
    ap.add_argument("--exp1_generators", type=str, default="uniform256,zipf128,repetitive90,english_like,single_symbol",
                    help="Comma-separated dataset generator names for experiment 1")

    # Experiment 2 controls
    ap.add_argument("--exp2_min_kb", type=int, default=4, help="Experiment 2 min size in KB (power-of-two growth)")
    ap.add_argument("--exp2_max_kb", type=int, default=2048, help="Experiment 2 max size in KB (power-of-two growth)")
    ap.add_argument("--exp2_generators", type=str, default="uniform256,zipf128,repetitive90",
                    help="Comma-separated dataset generator names for experiment 2")

    # Experiment 3: real files
    ap.add_argument("--files", type=str, default="", help="Comma-separated files to compress and restore")
    ap.add_argument("--show_tree", action="store_true", help="Print frequency map, tree and code map for each file")
    return ap

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows: List[MetricRow] = []

    # Experiment 1: distributions (fixed size)
    if not args.no_exp1:
        fixed_size = max(1, args.exp1_size_kb) * 1024
        gen_names = parse_csv_list(args.exp1_generators)

        for gen_name in gen_names:
            for run_id in range(1, args.runs + 1):
                dataset_name, data = generate_dataset(gen_name, fixed_size, args.seed + run_id)
                for pipeline in PIPELINES:
                    row = run_one(data, pipeline)
                    row.exp_name = "exp1_distribution"
                    row.dataset_name = dataset_name
                    row.run_id = run_id
                    rows.append(row)
            print(f"exp1: {gen_name} done")

    # Experiment 2: size scaling (multiple sizes, powers of 2)
    if not args.no_exp2:
        min_bytes = max(1, args.exp2_min_kb) * 1024
        max_bytes = max(1, args.exp2_max_kb) * 1024

        sizes: List[int] = []
        s = min_bytes
        while s <= max_bytes:
            sizes.append(s)
            s *= 2

        gen_names = parse_csv_list(args.exp2_generators)

        for gen_name in gen_names:
            for size_b in sizes:
                for run_id in range(1, args.runs + 1):
                    dataset_name, data = generate_dataset(gen_name, size_b, args.seed + 10_000 + size_b + run_id)
                    for pipeline in PIPELINES:
                        row = run_one(data, pipeline)
                        row.exp_name = "exp2_size_scaling"
                        row.dataset_name = dataset_name
                        row.run_id = run_id
                        rows.append(row)
            print(f"exp2: {gen_name} done")

    # Experiment 3: round-trip real files
    file_list = parse_csv_list(args.files)
    if file_list:
        rows.extend(run_files([Path(p) for p in file_list], outdir, show_tree=args.show_tree))

    # Write raw and summary
    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    # Plots
    if not args.no_plots:
        plot_experiment_1(rows, outdir)
        plot_experiment_2(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    if not args.no_plots:
        print("Charts saved in:", outdir.resolve())
    return 0 if ok_rate == 1.0 or not rows else 1


if __name__ == "__main__":
    raise SystemExit(main())
