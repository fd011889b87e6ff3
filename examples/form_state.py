"""
Form state held in a StateCell.

Shows the pattern a UI layer uses: one cell per form, widgets write dotted
paths, and a single listener re-renders on every committed change.
"""
import logging

from deepstate import CloneStrategy, StateCell

logger = logging.getLogger(__name__)


def render(change):
    logger.info(f"re-render v{change.version}: {change.path or '<root>'} -> {change.current}")


def main():
    logging.basicConfig(level=logging.INFO)

    form = StateCell(
        {'user': {'name': '', 'email': ''}, 'options': {'newsletter': False}},
        name='signup',
        clone_strategy=CloneStrategy.SPINE,
    )
    form.on_change(render)

    form.set('user.name', 'Ada', merge=False)
    form.set('user', {'email': 'ada@example.com'})

    # Several widget writes, one re-render
    with form.batch():
        form.set('options.newsletter', True)
        form.set('options.frequency', 'weekly')

    return form.get()


if __name__ == '__main__':
    main()
