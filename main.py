import argparse
import logging
from typing import List, Optional

from constants import GENERATOR_MAX_TIME_COEFFICIENT, MAX_ITERATIONS_COEFFICIENT
from excel_export import create_excel_report
from optimization_engine import calculate_metrics, run_experiment
from problem_generator import generate_problem
from route_model import format_hours
from route_visualization import plot_problem
from solver_options import SolverOption, parse_solver_option

DEFAULT_STRATEGIES = ["GREEDY", "ABC_P_RPAAN", "ABC_PN_RPNAAN", "TABU_RPAAN"]

def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Plan high-value routes between a fixed sequence of bases.")
    parser.add_argument("--bases", type=int, default=3, help="number of bases")
    parser.add_argument("--targets", type=int, default=0, help="number of targets (0: 10 per leg)")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--strategies", nargs="+", default=DEFAULT_STRATEGIES,
                        help=f"solver options, any of: {', '.join(o.label for o in SolverOption)} or 'all'")
    parser.add_argument("--runs", type=int, default=1, help="runs per strategy")
    parser.add_argument("--max-time-coefficient", type=float, default=GENERATOR_MAX_TIME_COEFFICIENT)
    parser.add_argument("--iterations-coefficient", type=float, default=MAX_ITERATIONS_COEFFICIENT)
    parser.add_argument("--excel", metavar="FILE", help="write an Excel report")
    parser.add_argument("--plot", metavar="FILE", help="save a route map of the best solution")
    parser.add_argument("--coordinates", metavar="FILE", help="write the best route as 'x; y' lines")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)

def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    if [s.lower() for s in args.strategies] == ["all"]:
        options = list(SolverOption)
    else:
        options = [parse_solver_option(s) for s in args.strategies]
    if SolverOption.GREEDY not in options: #deviations are measured against greedy
        options.insert(0, SolverOption.GREEDY)

    problem = generate_problem(args.bases, args.targets, seed=args.seed,
                               max_time_coefficient=args.max_time_coefficient)
    print(f"Generated {problem.bases_count} bases and {problem.targets_count} targets "
          f"({problem.targets_per_sub_path} per leg)")
    print(f"Max time in air per leg: {format_hours(problem.max_time_in_air_in_hours)}, "
          f"speed {problem.speed_in_km_per_hour} km/h")

    results = run_experiment([problem], options, runs_per_problem=args.runs, seed=args.seed,
                             max_iterations_coefficient=args.iterations_coefficient)
    solutions = results[0].solutions

    print("\n----- RESULTS -----")
    for solution in solutions:
        print(f"\n{solution.solver_option.label}: weight {solution.total_weight}, "
              f"time in air {format_hours(solution.total_time_in_air)}, "
              f"total time {format_hours(solution.total_time)}, "
              f"execution {solution.execution_time * 1000:.2f} ms")
        for info in solution.sub_paths_info():
            print(f"  {info}")

    metrics = calculate_metrics(results, options)
    print("\n----- DEVIATION FROM GREEDY -----")
    for result in metrics:
        print(f"{result.solver_option.label:>14}: best {result.best_deviation_from_greedy_in_percents:+.2f}%, "
              f"average {result.average_deviation_from_greedy_in_percents:+.2f}%, "
              f"worst {result.worst_deviation_from_greedy_in_percents:+.2f}%, "
              f"avg time {result.average_execution_time_in_ms:.2f} ms")

    best = max(solutions, key=lambda s: s.total_weight)
    print(f"\nBest: {best.solver_option.label} with weight {best.total_weight}")

    if args.excel:
        create_excel_report(solutions, metrics, args.excel, problem=problem)
        print(f"Excel report saved: {args.excel}")
    if args.plot:
        plot_problem(problem, best, args.plot, title=f"Best route ({best.solver_option.label})")
        print(f"Route map saved: {args.plot}")
    if args.coordinates:
        with open(args.coordinates, "w") as f:
            f.write(best.coordinates_text())
        print(f"Coordinates saved: {args.coordinates}")

if __name__ == "__main__":
    main()
