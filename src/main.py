# Entry point printing the competition results to the console

import logging
import os
import sys
from core.loader import load_competition
from core.results import build_results_view


def format_game(game):
    line = game['label']
    if game['state'] in ('in_progress', 'decided') or (game['state'] == 'inconsistent' and game['rounds_text']):
        line += f" | {game['rounds_text']}"
    if game['state'] == 'decided':
        line += f" | {game['outcome']}{game['points_text']}"
    if game['state'] == 'inconsistent':
        line += ' | inconsistent result'
    return line


def print_games(title, games):
    print(f"\n## {title}")
    for game in games:
        print(f"  {format_game(game)}")


def print_double_elimination(de):
    if de['final_games']:
        print_games("Final games", de['final_games'])
    print_games("No games lost", de['no_loss_games'])
    for match in de['no_loss_matches']:
        print(f"  next: {' vs '.join(match)}")
    print_games("1 game lost", de['one_loss_games'])
    for match in de['one_loss_matches']:
        print(f"  next: {' vs '.join(match)}")
    print("\n## Eliminated")
    for name in de['eliminated']:
        print(f"  {name}")


def print_swiss(swiss):
    print("\n## Scoreboard")
    for row in swiss['scoreboard']:
        print(f"  {row['rank']:>2}. {row['name']}  {row['score']}  ({row['tie_break_score']})")
    for swiss_round in swiss['rounds']:
        print_games(f"Round {swiss_round['number']} of {swiss_round['round_count']}", swiss_round['games'])
        if swiss_round['bye']:
            print(f"  Bye: {swiss_round['bye']} | bye = {swiss_round['bye_points_text']}")


def print_results(results):
    if not results['configured']:
        print("No competition configured yet.")
        return

    print(f"# {results['name']}")

    podium = results['podium']
    if podium:
        print(f"Winner: {podium['first'] or '???'}")
        print(f"2nd place: {podium['second'] or '???'}")
        print(f"3rd place: {podium['third'] or '???'}")

    if results['double_elimination']:
        print("\n# Double elimination tournament")
        print_double_elimination(results['double_elimination'])

    if results['swiss']:
        print("\n# Swiss-system tournament")
        print_swiss(results['swiss'])


def main():
    logging.basicConfig(level=logging.WARNING)

    script_dir = os.path.dirname(__file__)
    base_dir = os.path.dirname(script_dir)

    # Use command line argument if provided, otherwise use default path
    source = sys.argv[1] if len(sys.argv) > 1 else os.path.join(
        base_dir, 'data', 'competition-state', 'competition-summary.json')

    snapshot = load_competition(source)
    print_results(build_results_view(snapshot))


if __name__ == '__main__':
    main()
