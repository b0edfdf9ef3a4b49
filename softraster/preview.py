import pygame

from .framebuffer import Framebuffer


def show(fb: Framebuffer, title: str = "softraster"):
    """
    Open a window with the finished frame until it is closed or ESC is pressed.

    pygame surfarrays are indexed [x, y, color], the framebuffer [y, x, color],
    hence the axis swap.
    """
    pygame.init()
    try:
        screen = pygame.display.set_mode((fb.width, fb.height))
        pygame.display.set_caption(title)
        frame = pygame.surfarray.make_surface(fb.pixels.swapaxes(0, 1))
        clock = pygame.time.Clock()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
            screen.blit(frame, (0, 0))
            pygame.display.flip()
            clock.tick(30)
    finally:
        pygame.quit()
