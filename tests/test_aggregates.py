from sector_stock.schemas.dashboard import MaterialTotals
from sector_stock.utils.aggregates import compute_report, material_deficit, summarize


def _materials(report):
    return {m.name: m for m in report.materials}


def test_empty_ledger_report(db_session, seed):
    report = compute_report(db_session)

    assert report.summary.total_units == 2
    assert report.summary.total_items == 0
    assert report.summary.deficit == 0
    assert {s.name for s in report.sectors} == {"Logística", "TI"}
    assert all(m.quantity == 0 and m.need == 0 for m in report.materials)


def test_deficit_across_sectors(db_session, seed, ledger):
    ledger.upsert(db_session, sector_id=seed.logistics.id, material_id=seed.paper.id, quantity=4, need=10)
    ledger.upsert(db_session, sector_id=seed.it.id, material_id=seed.paper.id, quantity=3, need=10)

    report = compute_report(db_session)
    paper = _materials(report)["Papel A4"]

    assert (paper.quantity, paper.need, paper.deficit) == (7, 20, 13)
    assert report.summary.total_items == 7
    assert report.summary.deficit == 13

    ledger.upsert(db_session, sector_id=seed.logistics.id, material_id=seed.paper.id, quantity=10, need=10)

    assert compute_report(db_session).summary.deficit == 7


def test_material_without_records_contributes_nothing(db_session, seed, ledger):
    ledger.upsert(db_session, sector_id=seed.it.id, material_id=seed.paper.id, quantity=1, need=6)

    cable = _materials(compute_report(db_session))["Cabo de Rede"]

    assert (cable.quantity, cable.need, cable.deficit) == (0, 0, 0)
    assert cable.unit_of_measure == "Metro"


def test_surplus_does_not_offset_other_material(db_session, seed, ledger):
    ledger.upsert(db_session, sector_id=seed.it.id, material_id=seed.paper.id, quantity=0, need=5)
    ledger.upsert(db_session, sector_id=seed.it.id, material_id=seed.cable.id, quantity=100, need=0)

    report = compute_report(db_session)

    assert report.summary.deficit == 5
    assert report.summary.total_items == 100


def test_sector_totals(db_session, seed, ledger):
    ledger.upsert(db_session, sector_id=seed.it.id, material_id=seed.paper.id, quantity=2, need=5)
    ledger.upsert(db_session, sector_id=seed.it.id, material_id=seed.cable.id, quantity=7, need=1)

    sectors = {s.name: s for s in compute_report(db_session).sectors}

    assert (sectors["TI"].total_stock, sectors["TI"].total_need) == (9, 6)
    assert (sectors["Logística"].total_stock, sectors["Logística"].total_need) == (0, 0)


def test_deficit_monotonic_in_need_and_quantity():
    for quantity in range(0, 12, 3):
        for need in range(0, 12, 3):
            base = material_deficit(quantity, need)
            assert material_deficit(quantity, need + 1) >= base
            assert material_deficit(quantity + 1, need) <= base
            assert base >= 0


def test_report_deficit_follows_need_and_quantity(db_session, seed, ledger):
    ledger.upsert(db_session, sector_id=seed.logistics.id, material_id=seed.paper.id, quantity=4, need=10)
    ledger.upsert(db_session, sector_id=seed.it.id, material_id=seed.paper.id, quantity=3, need=10)
    ledger.upsert(db_session, sector_id=seed.it.id, material_id=seed.cable.id, quantity=5, need=2)
    base = compute_report(db_session).summary.deficit

    ledger.upsert(db_session, sector_id=seed.it.id, material_id=seed.paper.id, quantity=3, need=15)
    raised_need = compute_report(db_session).summary.deficit

    ledger.upsert(db_session, sector_id=seed.it.id, material_id=seed.paper.id, quantity=9, need=15)
    raised_quantity = compute_report(db_session).summary.deficit

    assert (base, raised_need, raised_quantity) == (13, 18, 12)
    assert raised_need >= base
    assert raised_quantity <= raised_need


def test_summarize_sums_per_material_deficits():
    materials = [
        MaterialTotals(id=1, name="A", unit_of_measure="Un", quantity=2, need=9, deficit=material_deficit(2, 9)),
        MaterialTotals(id=2, name="B", unit_of_measure="Un", quantity=9, need=2, deficit=material_deficit(9, 2)),
    ]

    report = summarize([], materials)

    assert report.summary.deficit == 7
    assert report.summary.total_items == 11
    assert report.summary.total_units == 0
