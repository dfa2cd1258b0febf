"""InsurAi claims service: employee token verification and claim/query email notifications."""
