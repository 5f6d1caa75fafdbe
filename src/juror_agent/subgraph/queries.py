from __future__ import annotations

GET_DRAWS = """
query Draws($juror: String!) {
  draws(where: { juror: $juror, dispute_: { period: vote, ruled: false } }) {
    dispute {
      id
    }
  }
}
"""

GET_DETAILS = """
query DisputeDetails($id: ID!) {
  dispute(id: $id) {
    id
    disputeID
    court {
      id
    }
    period
    ruled
    currentRound {
      id
      nbVotes
    }
    templateId
  }
}
"""

GET_EVIDENCE = """
query Evidences($disputeId: String!) {
  evidences(
    where: { evidenceGroup: $disputeId }
    orderBy: timestamp
    orderDirection: asc
  ) {
    id
    evidence
    sender {
      id
    }
    timestamp
    name
    description
  }
}
"""

GET_TEMPLATE = """
query DisputeTemplate($id: ID!) {
  disputeTemplate(id: $id) {
    templateData
  }
}
"""
