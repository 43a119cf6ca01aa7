import os
import sys
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))
import Program


def test_annual_summary_is_default(capsys):
    Program.main(['nj-couple'])
    out = capsys.readouterr().out
    assert 'ANNUAL INCOME AND TAX SUMMARY' in out
    assert '2026' in out
    assert '2055' in out
    assert 'TOTAL' in out


def test_year_range(capsys):
    Program.main(['nj-couple', '--mode', 'Balances', '--years', '2030-2032'])
    out = capsys.readouterr().out
    assert 'YEAR-END BALANCES' in out
    assert '  2031' in out
    assert '  2029 ' not in out
    assert '  2033 ' not in out


def test_year_details(capsys):
    Program.main(['nj-couple', '-m', 'YearDetails', '-y', '2035'])
    out = capsys.readouterr().out
    assert 'LEDGER FOR 2035' in out
    assert 'Alex (age 71)' in out
    assert 'Jordan (age 69)' in out
    assert 'Joint' in out
    assert 'NET WORTH' in out


def test_year_details_defaults_to_first_year(capsys):
    Program.main(['fl-retiree', '-m', 'YearDetails'])
    assert 'LEDGER FOR 2026' in capsys.readouterr().out


@pytest.mark.parametrize('mode,title', [('CashFlow', 'CASH FLOW'), ('Taxes', 'TAXES'),
                                        ('Withdrawals', 'WITHDRAWALS AND CONVERSIONS'),
                                        ('Contributions', 'CONTRIBUTIONS')])
def test_table_modes(capsys, mode, title):
    Program.main(['fl-retiree', '--mode', mode])
    assert title in capsys.readouterr().out


def test_validate_passes_for_sample_programs(capsys):
    Program.main(['fl-retiree', '--validate'])
    Program.main(['nj-couple', '--validate'])
    out = capsys.readouterr().out
    assert 'Ledger validation failed' not in out


def test_missing_program_exits(capsys):
    with pytest.raises(SystemExit) as exc:
        Program.main(['no-such-program'])
    assert exc.value.code == 1
    assert 'Spec file not found' in capsys.readouterr().out


def test_unknown_mode_rejected():
    with pytest.raises(SystemExit):
        Program.main(['nj-couple', '--mode', 'Paycheck'])
