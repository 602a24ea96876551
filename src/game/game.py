# src/game/game.py
import sys, argparse, logging
import pygame
from pygame import K_SPACE, K_UP, K_ESCAPE, K_r, K_n
from src.sim.config import SessionConfig, GameMode, TICK_RATE, COLOR_FG
from src.sim.collision import Outcome
from src.sim.seeds import seed_for_mode
from src.sim.session import Session, SessionEvent
from .leaderboard import Leaderboard
from .render import Effects, draw_session, draw_hud

MAX_TICKS_PER_FRAME = 5   # drop time instead of spiralling after a stall
TOP_SHOWN = 5


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--mode", type=str, default=GameMode.CLASSIC.value,
                   choices=[m.value for m in GameMode])
    p.add_argument("--seed", type=int, default=None,
                   help="Run seed. Omit for the mode's policy (wall clock, or today's date for daily).")
    p.add_argument("--name", type=str, default="Player")
    p.add_argument("--log-level", type=str, default="INFO")
    return p.parse_args()


def run():
    args = parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    mode = GameMode(args.mode)

    pygame.init()
    pygame.display.set_caption("Gap Runner")
    clock = pygame.time.Clock()
    board = Leaderboard()

    def new_session(seed):
        cfg = SessionConfig.for_mode(mode, seed=seed)
        s = Session(cfg)
        s.subscribe(SessionEvent.TERMINATED, on_terminated)
        return s, cfg.seed

    def on_terminated(outcome: Outcome, final_score: int):
        nonlocal best, top
        if outcome.crashed:
            snap = session.snapshot()
            fx.explode(snap.player_x, snap.player_y)
        board.save_score(args.name, final_score, mode)
        best = max(best, final_score)
        top = board.entries()[:TOP_SHOWN]

    session, current_seed = new_session(args.seed)
    cfg = session.config
    screen = pygame.display.set_mode((int(cfg.viewport_w), int(cfg.viewport_h)))
    font = pygame.font.SysFont("jetbrainsmono", 18)
    fx = Effects(int(cfg.viewport_w), int(cfg.viewport_h))
    best = board.best_score()
    top = []

    tick_s = 1.0 / cfg.tick_rate
    budget = 0.0

    while True:
        budget += clock.tick(TICK_RATE) / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    pygame.quit(); sys.exit()
                if event.key == K_r and session.terminated:
                    # Restart SAME seed
                    session, current_seed = new_session(current_seed)
                    budget = 0.0
                if event.key == K_n and session.terminated:
                    # Restart with a fresh seed from the mode's policy
                    session, current_seed = new_session(seed_for_mode(mode))
                    budget = 0.0

        keys = pygame.key.get_pressed()
        lift_held = bool(keys[K_SPACE] or keys[K_UP] or pygame.mouse.get_pressed()[0])

        # Fixed-step: run as many whole ticks as the elapsed time allows
        ticks = 0
        while budget >= tick_s and ticks < MAX_TICKS_PER_FRAME and not session.terminated:
            session.step(lift_held)
            budget -= tick_s
            ticks += 1
        if ticks == MAX_TICKS_PER_FRAME or session.terminated:
            budget = 0.0

        # --- Render ---
        snap = session.snapshot()
        fx.update(scrolling=not session.terminated)
        draw_session(screen, snap, fx)
        draw_hud(screen, font, snap, best)
        screen.blit(font.render("SPACE/UP hold to rise | ESC quit", True, (160, 180, 210)), (12, 32))

        if session.terminated:
            msg = f"{snap.outcome.value.replace('_', ' ').upper()}  score {snap.score}  |  R restart | N new seed"
            txt = font.render(msg, True, COLOR_FG)
            screen.blit(txt, ((screen.get_width() - txt.get_width()) // 2, screen.get_height() // 2))
            for i, e in enumerate(top, start=1):
                line = font.render(f"{i}. {e.get('name', '?')}  {e['score']}  {e.get('mode', '')}", True, (160, 180, 210))
                screen.blit(line, ((screen.get_width() - line.get_width()) // 2, screen.get_height() // 2 + 8 + 22 * i))

        pygame.display.flip()


if __name__ == "__main__":
    run()
