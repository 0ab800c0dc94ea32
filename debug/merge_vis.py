import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from shapely.geometry import box

import polyreduce
from plot_geometry import plot_reduction

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

if len(sys.argv) > 1:
    # python debug/merge_vis.py parks.geojson 200
    fc = polyreduce.load_feature_collection(sys.argv[1])
    radius = float(sys.argv[2]) if len(sys.argv) > 2 else 0.0
    records = polyreduce.to_polygon_records(fc)
    if radius > 0:
        records = polyreduce.buffer_polygons(records, radius)
else:
    squares = [box(x, y, x + 1, y + 1) for x, y in [(0, 0), (0.5, 0), (0.9, 0.4), (3, 0), (3.5, 0.5), (6, 6)]]
    records = polyreduce.records_from_geometries(squares, names=[f"square {i}" for i in range(len(squares))])

reduced, stats = polyreduce.reduce_polygons(records, return_stats=True)
print(stats.summary())
for record in reduced:
    print(f"  {record.merge_count:3d}  {record.name}")

plot_reduction([r.geometry for r in records], [r.geometry for r in reduced], title="polyreduce")
