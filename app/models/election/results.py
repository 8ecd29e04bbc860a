"""Trial result table - one row per trial of a simulated scenario."""

TRIAL_RESULT_DDL = """
CREATE TABLE IF NOT EXISTS trial_result (
    scenario VARCHAR NOT NULL,
    margin DOUBLE NOT NULL,
    run_key VARCHAR NOT NULL,
    dataset_key VARCHAR NOT NULL,
    num_trials BIGINT NOT NULL,
    elections_per_trial BIGINT NOT NULL,
    majority_threshold DOUBLE,
    seed VARCHAR,
    trial INTEGER NOT NULL,
    prob_a DOUBLE NOT NULL,
    prob_b DOUBLE NOT NULL,
    mean_votes_a DOUBLE NOT NULL,
    mean_votes_b DOUBLE NOT NULL,
    computed_at TIMESTAMP NOT NULL,
    PRIMARY KEY (scenario, margin, run_key, trial)
)
"""
