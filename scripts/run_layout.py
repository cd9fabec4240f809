import json
from pathlib import Path
from typing import Optional, Tuple

import matplotlib.pyplot as plt
import typer

from bubbleset import BubbleSet, PackingStrategy, fixed_solution
from bubbleset.plotter import plot_layout
from bubbleset.sets import SET_KEY_FIELD


def main(
        input_path: Path,
        output_path: Path,
        strategy: PackingStrategy = PackingStrategy.pack,
        width: float = 600.0,
        height: float = 600.0,
        padding: float = 10.0,
        point_padding: Optional[float] = None,
        plot_path: Optional[Path] = None,
        figsize: Tuple[int, int] = (10, 10),
        random_state: Optional[int] = None,
        verbose: bool = False
):
    """Lay out the records of INPUT_PATH and write their positions to OUTPUT_PATH.

    The input is a JSON object with "records" (objects with a "set" list) and "circles", the solved
    diagram as {set: {"x", "y", "radius"}}.
    """
    document = json.loads(input_path.read_text())
    records = document["records"]

    packing_config = {}
    if point_padding is not None:
        packing_config['padding'] = point_padding

    layout = BubbleSet(
        size=(width, height),
        padding=padding,
        packing_strategy=strategy,
        packing_config=packing_config,
        layout_function=fixed_solution(document["circles"]),
        random_state=random_state
    )
    layout.fit(records, verbose=verbose, relax=True)

    if verbose:
        print(f'Writing {len(records)} positions to {output_path}...')
    output = {
        'records': [
            {'set': record.get('set', []), 'region': record.get(SET_KEY_FIELD), 'x': record.get('x'),
             'y': record.get('y')}
            for record in records
        ],
        'regions': {
            key: {'center': None if region.center is None else [region.center.x, region.center.y],
                  'inner_radius': region.inner_radius, 'count': region.count}
            for key, region in layout.regions.items()
        }
    }
    output_path.write_text(json.dumps(output, indent=2))

    if plot_path is not None:
        if verbose:
            print('Exporting layout plot...')
        fig, ax = plt.subplots(figsize=figsize)
        plot_layout(layout, ax=ax, title=f'{input_path.stem} ({strategy.value})', draw_inner_radius=True)
        fig.savefig(plot_path)


if __name__ == '__main__':
    typer.run(main)
