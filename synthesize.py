import dataclasses
import sys

from solsynth.argument_parser.parser import SynthesizerArgs, parse_args
from solsynth.config.generator_config import GeneratorConfig
from solsynth.core.corpus import generate_corpus
from solsynth.core.synthesizer import SolidityGenerator, enable_debug


def build_config(args: SynthesizerArgs) -> GeneratorConfig:
    """Environment defaults, overridden by whatever the command line sets."""
    config = GeneratorConfig()
    overrides = {}
    if args.max_source_units is not None:
        overrides["max_source_units"] = args.max_source_units
    if args.max_contracts is not None:
        overrides["max_contracts"] = args.max_contracts
    return dataclasses.replace(config, **overrides)


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.debug:
        enable_debug()
    config = build_config(args)

    if args.corpus_mode:
        written = generate_corpus(args.seed, args.count, args.out, args.processes, config)
        print(f"Wrote {len(written)} programs to {args.out}")
        return 0

    for seed in range(args.seed, args.seed + args.count):
        sys.stdout.write(SolidityGenerator(seed, config).generate_test_program())
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
