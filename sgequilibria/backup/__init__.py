from sgequilibria.backup.operators import SGBackupOperator, CorrelatedQ, BimatrixQBackup
