"""Flow performance regression alerting.

Quick Start:
    from flowperf.models import FlowPerfConfig, OrgContext, TestResultOutput
    from flowperf.pipeline import report_results
    from flowperf.reporters import build_reporters

    config = FlowPerfConfig()
    outcome = await report_results(
        outputs,
        OrgContext(org_id="00D000000000001"),
        config=config,
        reporters=build_reporters(config),
        baselines=store,
        sink=store,
    )
"""

__version__ = "0.1.0"
