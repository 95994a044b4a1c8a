#!/usr/bin/env python3
"""
Proof Verification Script
=========================

Verifies a snarkjs Groth16 proof offline and reports pairing time, or
computes the public inputs for an order.

Usage:
    python scripts/verify_proof.py verify --vk verification_key.json \\
        --proof proof.json --public public.json [--iterations N]
    python scripts/verify_proof.py commit --amount 100 --price 2500 \\
        --side 0 --token-id 1 --trader 0xabc [--salt S]

Exit status is 0 when the proof verifies and 1 otherwise.
"""

import argparse
import json
import statistics
import sys
import time
from dataclasses import dataclass
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from shared.logging import setup_logging
from shared.zk import (
    CurveArithmeticError,
    ProofValidationError,
    PublicSignals,
    ZKProof,
    load_verifying_key,
)
from shared.zk.commitments import generate_salt, order_commitment, order_nullifier
from shared.zk.validator import ProofValidator
from shared.zk.verifier import verify_groth16


DEFAULT_ITERATIONS = 1


@dataclass
class TimingResult:
    """Timing of repeated verifications."""
    iterations: int
    valid: bool
    min_ms: float
    max_ms: float
    mean_ms: float
    median_ms: float


def load_json(path: str) -> object:
    with open(path) as f:
        return json.load(f)


def run_verify(args: argparse.Namespace) -> int:
    try:
        vk = load_verifying_key(args.vk)
        proof = ZKProof.from_snarkjs(load_json(args.proof))
        signals = PublicSignals(signals=load_json(args.public)).signals
    except (OSError, ValueError, KeyError) as e:
        print(f"❌ Could not load inputs: {e}")
        return 1

    try:
        ProofValidator(arity=vk.public_input_count).validate(proof, signals)
    except ProofValidationError as e:
        print(f"❌ Rejected ({e.code}): {e}")
        return 1

    times: list[float] = []
    valid = False
    for i in range(args.iterations):
        start = time.perf_counter()
        try:
            valid = verify_groth16(vk, proof, signals, check_subgroup=not args.skip_subgroup)
        except CurveArithmeticError as e:
            print(f"❌ Curve arithmetic fault: {e}")
            return 1
        elapsed_ms = (time.perf_counter() - start) * 1000
        times.append(elapsed_ms)
        if args.iterations > 1:
            print(f"  [{i+1}/{args.iterations}] {elapsed_ms:.0f}ms")

    result = TimingResult(
        iterations=args.iterations,
        valid=valid,
        min_ms=min(times),
        max_ms=max(times),
        mean_ms=statistics.mean(times),
        median_ms=statistics.median(times),
    )

    status = "✅ VALID" if result.valid else "❌ INVALID"
    print(f"\n{status}")
    for i, signal in enumerate(signals):
        print(f"  Signal[{i}]:    {signal}")
    print(f"  Iterations:   {result.iterations}")
    print(f"  Mean:         {result.mean_ms:.0f}ms")
    print(f"  Median:       {result.median_ms:.0f}ms")
    print(f"  Min/Max:      {result.min_ms:.0f}ms / {result.max_ms:.0f}ms")

    if args.output:
        with open(args.output, "w") as f:
            json.dump(
                {
                    "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ"),
                    "valid": result.valid,
                    "iterations": result.iterations,
                    "mean_ms": result.mean_ms,
                    "median_ms": result.median_ms,
                    "min_ms": result.min_ms,
                    "max_ms": result.max_ms,
                },
                f,
                indent=2,
            )
        print(f"Results saved to: {args.output}")

    return 0 if result.valid else 1


def run_commit(args: argparse.Namespace) -> int:
    salt = args.salt if args.salt is not None else generate_salt()
    try:
        commitment = order_commitment(
            salt=salt,
            amount=args.amount,
            price=args.price,
            side=args.side,
            token_id=args.token_id,
            trader=args.trader,
        )
        nullifier = order_nullifier(salt, args.trader)
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    # Printed for the trader to keep, never logged
    print(json.dumps(
        {
            "salt": str(salt),
            "commitment": str(commitment),
            "nullifier": str(nullifier),
        },
        indent=2,
    ))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Verify order proofs and build order commitments")
    sub = parser.add_subparsers(dest="command", required=True)

    verify = sub.add_parser("verify", help="Verify a snarkjs proof")
    verify.add_argument("--vk", required=True, help="verification_key.json")
    verify.add_argument("--proof", required=True, help="proof.json")
    verify.add_argument("--public", required=True, help="public.json")
    verify.add_argument("--iterations", "-n", type=int, default=DEFAULT_ITERATIONS,
                        help=f"Number of iterations (default: {DEFAULT_ITERATIONS})")
    verify.add_argument("--skip-subgroup", action="store_true",
                        help="Skip G2 subgroup checks on proof.b and the key points")
    verify.add_argument("--output", "-o", type=str, help="Output JSON file for timings")
    verify.set_defaults(func=run_verify)

    commit = sub.add_parser("commit", help="Compute an order commitment and nullifier")
    commit.add_argument("--amount", type=int, required=True)
    commit.add_argument("--price", type=int, required=True)
    commit.add_argument("--side", type=int, choices=[0, 1], required=True, help="0 buy, 1 sell")
    commit.add_argument("--token-id", type=int, required=True)
    commit.add_argument("--trader", type=str, required=True)
    commit.add_argument("--salt", type=int, help="Reuse an existing salt")
    commit.set_defaults(func=run_commit)

    args = parser.parse_args()
    if getattr(args, "iterations", 1) < 1:
        parser.error("--iterations must be at least 1")

    setup_logging(log_level="WARNING", json_logs=False, service_name="verify-proof")

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
